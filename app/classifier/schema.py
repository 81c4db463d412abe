"""
JSON schema for the reasoning service's structured output.

Strict mode requires every property to be listed as required; optional
values are expressed as nullable types instead.
"""

END_REASONS = [
    "got_complete_info",
    "no_discount_confirmed",
    "not_interested",
    "max_attempts_reached",
    "unclear_response",
    "continue",
]

RESPONSE_SCHEMA = {
    "type": "object",
    "properties": {
        "hasDiscount": {
            "type": "boolean",
            "description": "Whether the business offers a military discount",
        },
        "discountAmount": {
            "type": ["string", "null"],
            "description": "The percentage or amount of the discount",
        },
        "discountDetails": {
            "type": "string",
            "description": "Additional details about the discount",
        },
        "availabilityInfo": {
            "type": ["string", "null"],
            "description": "When or where the discount is available",
        },
        "eligibilityInfo": {
            "type": ["string", "null"],
            "description": "Who is eligible for the discount",
        },
        "nextResponse": {
            "type": "string",
            "description": "What the caller should say next",
        },
        "shouldEndCall": {
            "type": "boolean",
            "description": "Whether the conversation should end",
        },
        "endReason": {
            "type": "string",
            "enum": END_REASONS,
            "description": "Why the call ends, or continue",
        },
    },
    "required": [
        "hasDiscount",
        "discountAmount",
        "discountDetails",
        "availabilityInfo",
        "eligibilityInfo",
        "nextResponse",
        "shouldEndCall",
        "endReason",
    ],
    "additionalProperties": False,
}

RESPONSE_FORMAT = {
    "type": "json_schema",
    "name": "analyze_response",
    "schema": RESPONSE_SCHEMA,
    "strict": True,
}

