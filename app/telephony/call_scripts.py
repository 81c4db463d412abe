"""Fixed lines spoken by the discount survey caller."""

GREETING = (
    "Hi, I'm calling on behalf of Valor, a military discount directory. "
    "We're creating a list to help service members and their families find military discounts. "
    "Could you tell me if you offer a military discount, and if so, what percentage?"
)

REPROMPT = "Sorry, I didn't catch that. Could you please repeat?"

NO_RESPONSE_GOODBYE = (
    "I'm sorry, I'm having trouble hearing you. We'll try again another time. Goodbye."
)

CLOSING = "Thank you for the information. Have a great day!"

UNKNOWN_BUSINESS_GOODBYE = "Thank you for your time. Goodbye."

ERROR_GOODBYE = (
    "I'm sorry, we're experiencing a technical problem. We'll call back another time. Goodbye."
)
