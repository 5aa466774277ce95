from __future__ import annotations

from dataclasses import dataclass

from contracts.standoff import DEFAULT_ANNOTATION_SET


@dataclass(frozen=True, slots=True)
class UnpackConfig:
    """
    Markup unpacking parameters.

    Defaults are explicit constants and reproduce the canonical layout:
    tokens joined by one space, blocks and pages separated by a blank line.
    """

    # Substitution type (compared case-insensitively) whose SUBS_CONTENT replaces
    # the token text. Tokens with any other substitution type are skipped.
    first_hyphen_part_type: str = "HypPart1"

    token_separator: str = " "
    block_separator: str = "\n\n"
    page_separator: str = "\n\n"

    annotation_set: str = DEFAULT_ANNOTATION_SET

    def validate(self) -> None:
        if self.first_hyphen_part_type.strip() == "":
            raise ValueError("first_hyphen_part_type must be a non-empty string")
        if self.annotation_set.strip() == "":
            raise ValueError("annotation_set must be a non-empty string")
        # Line start offsets reserve exactly one position for the token separator.
        if len(self.token_separator) != 1:
            raise ValueError("token_separator must be exactly one character")

    def __post_init__(self) -> None:
        self.validate()

    def to_dict(self) -> dict[str, str]:
        return {
            "first_hyphen_part_type": self.first_hyphen_part_type,
            "token_separator": self.token_separator,
            "block_separator": self.block_separator,
            "page_separator": self.page_separator,
            "annotation_set": self.annotation_set,
        }
