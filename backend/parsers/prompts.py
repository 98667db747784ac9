"""Extraction prompt for bank statement text."""

import json

from backend.models import DepositOrWithdrawal

# Field names are a compatibility contract with downstream consumers.
STATEMENT_SCHEMA: dict = {
    "metadata": {
        "ownerName": "",
        "bankName": "",
        "accountNumber": "",
        "statementDate": "",
        "dateRangeStartDate": "",
        "dateRangeEndDate": "",
        "totalAmountOfDepositsAsReported": None,
        "totalAmountOfWithdrawalsAsReported": None,
        "totalCountOfDepositsAsReported": None,
        "totalCountOfWithdrawalsAsReported": None,
    },
    "transactions": [
        {
            "date": "",
            "description": "",
            "amount": 0.0,
            "depositOrWithdrawal": "",
            "transactionCategory": "",
        }
    ],
}

CATEGORY_EXAMPLES = ["Phone", "Electricity", "Fuel", "Supplies", "Maintenance"]

PROMPT_TEMPLATE = """
Extract the following from the bank statement text below:
1. Metadata: Owner Name, Bank Name, Account Number, Statement Date,
   DateRangeStartDate, DateRangeEndDate,
   TotalAmountOfDepositsAsReported (if present),
   TotalAmountOfWithdrawalsAsReported (if present),
   TotalCountOfDepositsAsReported (if present),
   TotalCountOfWithdrawalsAsReported (if present)
2. Transactions: Array of objects {{ Date, Description, Amount, DepositOrWithdrawal, TransactionCategory }}

For each transaction, suggest a TransactionCategory from its description (e.g., {categories}, etc.)
DepositOrWithdrawal must be one of: {directions}. Amount must be a number.
Return ONLY raw JSON (no markdown, no commentary) with this structure:
{schema}

Statement text:
\"\"\"{text}\"\"\"
"""


def build_prompt(statement_text: str) -> str:
    """
    Render the extraction prompt for the given statement text.

    The output depends only on the text; the text is embedded verbatim.
    """
    return PROMPT_TEMPLATE.format(
        categories=", ".join(CATEGORY_EXAMPLES),
        directions=", ".join(f'"{d.value}"' for d in DepositOrWithdrawal),
        schema=json.dumps(STATEMENT_SCHEMA, indent=2),
        text=statement_text,
    )
