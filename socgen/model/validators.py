"""
Validation utilities for design configuration documents.

Provides semantic checks beyond what Pydantic provides. Findings are
reported, never raised: the generator accepts every document the models
accept.
"""

from dataclasses import dataclass
from typing import List, Set

from .block import BlockCategory, BlockKind, matching_kinds
from .design import DesignConfig, group_blocks

# CSR windows are 0x01000000 apart and instances 0x00100000 apart.
MAX_INSTANCES_PER_CSR_WINDOW = 0x01000000 // 0x00100000


@dataclass
class ValidationIssue:
    """Validation finding with context."""

    severity: str  # 'error', 'warning', 'info'
    message: str
    location: str  # e.g. 'block:uart0', 'document'
    suggestion: str = ""


class DesignValidator:
    """Semantic validator for a ``DesignConfig``."""

    def __init__(self, design: DesignConfig):
        self.design = design
        self.errors: List[ValidationIssue] = []
        self.warnings: List[ValidationIssue] = []
        self.infos: List[ValidationIssue] = []

    def validate_all(self) -> bool:
        """
        Run all validation checks.

        Returns:
            True if no errors (warnings are allowed)
        """
        self.errors.clear()
        self.warnings.clear()
        self.infos.clear()

        self.validate_document_shape()
        self.validate_unique_ids()
        self.validate_classification()
        self.validate_processors()
        self.validate_instance_counts()

        return len(self.errors) == 0

    @property
    def issues(self) -> List[ValidationIssue]:
        return self.errors + self.warnings + self.infos

    def validate_document_shape(self) -> None:
        if self.design.has_both_shapes:
            self.warnings.append(
                ValidationIssue(
                    severity="warning",
                    message="Both enabledBlocks and digitalBlocks are present; digitalBlocks is ignored",
                    location="document",
                    suggestion="Keep only one of the two block lists",
                )
            )
        elif self.design.enabled_blocks is None and self.design.digital_blocks is None:
            self.warnings.append(
                ValidationIssue(
                    severity="warning",
                    message="Neither enabledBlocks nor digitalBlocks is present",
                    location="document",
                    suggestion="The generated design will only contain the baseline SRAM",
                )
            )
        if not self.design.selected_blocks:
            self.infos.append(
                ValidationIssue(
                    severity="info",
                    message="No blocks selected",
                    location="document",
                )
            )

    def validate_unique_ids(self) -> None:
        """Check for duplicate ids among selected blocks."""
        seen: Set[str] = set()
        for block in self.design.selected_blocks:
            if block.id in seen:
                self.errors.append(
                    ValidationIssue(
                        severity="error",
                        message=f"Duplicate block id: '{block.id}'",
                        location=f"block:{block.id}",
                        suggestion="Use count to request several instances of one block",
                    )
                )
            seen.add(block.id)

    def validate_classification(self) -> None:
        for block in self.design.selected_blocks:
            kinds = matching_kinds(block.id)
            if len(kinds) > 1:
                names = ", ".join(k.value for k in kinds)
                self.warnings.append(
                    ValidationIssue(
                        severity="warning",
                        message=(
                            f"Block id '{block.id}' matches several kinds ({names}); "
                            f"classified as '{kinds[0].value}'"
                        ),
                        location=f"block:{block.id}",
                        suggestion="Rename the block so its id contains a single keyword",
                    )
                )
            elif block.kind == BlockKind.OTHER:
                self.infos.append(
                    ValidationIssue(
                        severity="info",
                        message=f"Block id '{block.id}' is not a known kind and is not instantiated",
                        location=f"block:{block.id}",
                    )
                )
            if block.category != BlockCategory.IO and block.count > 1:
                self.warnings.append(
                    ValidationIssue(
                        severity="warning",
                        message=f"count={block.count} ignored for {block.category.value} block '{block.id}'",
                        location=f"block:{block.id}",
                    )
                )

    def validate_processors(self) -> None:
        groups = group_blocks(self.design.selected_blocks)
        for block in groups.processors[1:]:
            self.warnings.append(
                ValidationIssue(
                    severity="warning",
                    message=f"Processor '{block.id}' ignored; '{groups.processors[0].id}' is the active CPU",
                    location=f"block:{block.id}",
                    suggestion="Select a single processor",
                )
            )

    def validate_instance_counts(self) -> None:
        """Check that each IO kind fits in its CSR window."""
        groups = group_blocks(self.design.selected_blocks)
        totals = {}
        for instance in groups.io_instances:
            totals[instance.kind] = totals.get(instance.kind, 0) + 1
        for kind, total in totals.items():
            if total > MAX_INSTANCES_PER_CSR_WINDOW:
                self.errors.append(
                    ValidationIssue(
                        severity="error",
                        message=(
                            f"{total} {kind.value} instances exceed the "
                            f"{MAX_INSTANCES_PER_CSR_WINDOW} that fit in one CSR window"
                        ),
                        location=f"kind:{kind.value}",
                        suggestion="Reduce count",
                    )
                )


def validate_design(design: DesignConfig) -> List[ValidationIssue]:
    """Convenience wrapper returning all findings for a document."""
    validator = DesignValidator(design)
    validator.validate_all()
    return validator.issues
