from commandforge.parsers.rules_text import NUMBER_WORDS, parse_copy_limit, parse_number

__all__ = [
    "NUMBER_WORDS",
    "parse_copy_limit",
    "parse_number",
]
