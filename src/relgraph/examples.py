"""
Example survey builder for demos and tests.

Builds the CSV export of a small group rating each other, in the format
produced by the online form: a timestamp column, the respondent's name,
then one "Votre relation vis-à-vis de : <name>" column per person.
"""
import csv
from io import StringIO
from typing import Dict, List, Optional, Sequence

QUESTION_PREFIX = "Votre relation vis-à-vis de : "

EXAMPLE_PEOPLE = ["Alice", "Bob", "Chloé", "David"]

# respondent -> {target: answer}
EXAMPLE_ANSWERS: List[Dict[str, Dict[str, str]]] = [
    {"Alice": {"Bob": "ami", "Chloé": "Meilleur ami", "David": "neutre"}},
    {"Bob": {"Alice": "amour", "Chloé": "ami", "David": "connaît pas"}},
    {"Chloé": {"Alice": "Meilleure amie", "Bob": "ami ++", "David": "famille"}},
    {"David": {"Alice": "neutre", "Bob": "entre neutre et haine", "Chloé": "famille"}},
    # Alice answered twice; the stronger answer must win
    {"Alice": {"Bob": "amour", "David": "pas trop"}},
]


def build_example_survey_csv(
    people: Sequence[str] = EXAMPLE_PEOPLE,
    answers: Optional[List[Dict[str, Dict[str, str]]]] = None,
) -> str:
    if answers is None:
        answers = EXAMPLE_ANSWERS

    out = StringIO()
    writer = csv.writer(out, lineterminator="\n")
    writer.writerow(["Horodateur", "Nom"] + [f"{QUESTION_PREFIX}{p}" for p in people])

    for i, response in enumerate(answers):
        for respondent, ratings in response.items():
            row = [f"2024/01/{i + 1:02d} 10:00:00", respondent]
            row.extend(ratings.get(p, "") for p in people)
            writer.writerow(row)

    return out.getvalue()


EXAMPLE_CONFIG = {
    "relationGroups": {
        "meilleur ami": ["meilleure amie", "best friend"],
        "entre ami et neutre": ["pas trop"],
    }
}
