# college_erp/utils/section_code.py
from typing import Dict

DEFAULT_BRANCH_ABBR = "GN"

DEPARTMENT_TO_BRANCH_ABBR: Dict[str, str] = {
    "Computer Science": "CS",
    "Mathematics": "MA",
    "Physics": "PY",
    "History": "HI",
}


def department_abbreviation(department_name: str | None) -> str:
    return DEPARTMENT_TO_BRANCH_ABBR.get(department_name or "", DEFAULT_BRANCH_ABBR)


def semester_abbreviation(term: str, year: int) -> str:
    """("Odd", 2024) -> "O24". A full semester name such as "Odd 2024" also works as term."""
    term_part = term.strip().split(" ")[0]
    return f"{term_part[:1].upper()}{str(year)[-2:]}"


def build_section_code(department_name: str | None, term: str, year: int, section_letter: str) -> str:
    return (
        f"{department_abbreviation(department_name)}"
        f"{semester_abbreviation(term, year)}"
        f"{section_letter.strip().upper()}"
    )
