"""Adaptive prompt composition.

Turns a ProjectProfile and the project's files into the three texts sent to
the model:
- instruction: role, profile summary, module blocks, output requirements and,
  on retries, the escalation block
- context: prioritized source files, cut to the context budget
- prompt: the analysis request, led by the caller's instructions

Composition is deterministic for identical inputs and attempt number, and
every text respects its character budget.
"""

import logging
from collections.abc import Sequence
from dataclasses import dataclass

from codeguard.config import AnalysisSettings, CompositionLimits
from codeguard.llm.prompts import (
    build_analysis_prompt,
    build_escalation_block,
    build_final_requirements,
    build_profile_section,
    get_base_instruction,
)
from codeguard.models.files import FileRecord
from codeguard.models.profile import Complexity, ModuleDescriptor, ProjectProfile
from codeguard.models.report import ReportKind

logger = logging.getLogger(__name__)

TRUNCATION_MARKER = "\n[...Truncated to fit the size limit...]"


@dataclass(frozen=True)
class ComposedInput:
    """Model input for a single attempt.

    Attributes:
        instruction: System instruction text
        context: Concatenated file context
        prompt: Analysis request text
        truncated: True if any file was left out of the context
        omitted_files: Number of files left out of the context
        attempt: Attempt number the instruction was built for
    """

    instruction: str
    context: str
    prompt: str
    truncated: bool = False
    omitted_files: int = 0
    attempt: int = 1


# =============================================================================
# Section builder
# =============================================================================


@dataclass(frozen=True)
class PromptSection:
    """A named block of prompt text.

    Attributes:
        name: Section identifier
        text: Section content
        required: Required sections are never dropped to meet a budget
        priority: Optional sections with lower priority are dropped first
    """

    name: str
    text: str
    required: bool = True
    priority: int = 0


class PromptBuilder:
    """Ordered collection of named sections joined once at render time."""

    def __init__(self, separator: str = "\n\n") -> None:
        self.separator = separator
        self._sections: list[PromptSection] = []

    def add(
        self,
        name: str,
        text: str,
        required: bool = True,
        priority: int = 0,
    ) -> "PromptBuilder":
        """Append a section. Empty text is ignored."""
        text = text.strip()
        if text:
            self._sections.append(PromptSection(name, text, required, priority))
        return self

    def names(self) -> list[str]:
        """Section names in order."""
        return [s.name for s in self._sections]

    def _join(self, sections: Sequence[PromptSection]) -> str:
        return self.separator.join(s.text for s in sections)

    def render(self, budget: int | None = None) -> tuple[str, list[str]]:
        """Join the sections, dropping or cutting content to meet the budget.

        Optional sections go first, lowest priority first (later sections
        first among equals). If the required sections alone are still over
        the budget, the text is hard-cut and ends with a truncation marker.

        Args:
            budget: Maximum length of the result (unbounded if None)

        Returns:
            Tuple of (rendered text, names of dropped sections)
        """
        kept = list(self._sections)
        text = self._join(kept)
        dropped: list[str] = []

        if budget is None or len(text) <= budget:
            return text, dropped

        optional = [(i, s) for i, s in enumerate(kept) if not s.required]
        drop_order = [s for _, s in sorted(optional, key=lambda p: (p[1].priority, -p[0]))]
        for section in drop_order:
            kept.remove(section)
            dropped.append(section.name)
            text = self._join(kept)
            if len(text) <= budget:
                return text, dropped

        return _hard_cut(text, budget), dropped


def _hard_cut(text: str, budget: int) -> str:
    """Cut text to budget, ending with the truncation marker when it fits."""
    if len(text) <= budget:
        return text
    if budget <= len(TRUNCATION_MARKER):
        return text[:budget]
    return text[: budget - len(TRUNCATION_MARKER)] + TRUNCATION_MARKER


# =============================================================================
# Context assembly
# =============================================================================


def file_header(record: FileRecord) -> str:
    """Header line preceding a file in the context."""
    return f"\n--- FILE: {record.path} ({record.size} chars) ---\n"


def omission_marker(omitted: int) -> str:
    """Marker appended when files were left out of the context."""
    return f"\n[...Context limit reached. {omitted} files omitted...]\n"


def prioritize_files(
    files: Sequence[FileRecord],
    modules: Sequence[ModuleDescriptor],
) -> list[FileRecord]:
    """Order files for the context.

    Files inside the focus of any detected module come first; within each
    tier smaller files come first. The sort is stable.

    Args:
        files: All files of the project
        modules: Detected modules

    Returns:
        Files in context order
    """
    focused = [m for m in modules if m.focus_pattern]

    def key(record: FileRecord) -> tuple[int, int]:
        in_focus = any(m.matches_focus(record.path) for m in focused)
        return (0 if in_focus else 1, record.size)

    return sorted(files, key=key)


# =============================================================================
# Composer
# =============================================================================


class PromptComposer:
    """Composes model input from a profile and the project files."""

    def __init__(self, settings: AnalysisSettings | None = None) -> None:
        """Initialize the composer.

        Args:
            settings: Analysis settings (defaults if None)
        """
        self.settings = settings or AnalysisSettings()

    @property
    def limits(self) -> CompositionLimits:
        return self.settings.composition

    def module_limit(self, complexity: Complexity) -> int:
        """Number of module blocks included for a complexity tier."""
        if complexity is Complexity.ENTERPRISE:
            return self.limits.enterprise_modules
        if complexity is Complexity.COMPLEX:
            return self.limits.complex_modules
        return self.limits.default_modules

    def compose(
        self,
        profile: ProjectProfile,
        files: Sequence[FileRecord],
        user_instructions: str | None = None,
        kind: ReportKind = ReportKind.AUDIT,
        attempt: int = 1,
    ) -> ComposedInput:
        """Compose the full model input.

        Args:
            profile: Project profile
            files: All files of the project
            user_instructions: Free-form instructions from the caller
            kind: Report kind
            attempt: Attempt number (escalation is added when > 1)

        Returns:
            ComposedInput
        """
        context, omitted = self.compose_context(profile, files)
        composed = ComposedInput(
            instruction=self.compose_instruction(profile, kind, attempt),
            context=context,
            prompt=self.compose_prompt(profile, user_instructions, kind),
            truncated=omitted > 0,
            omitted_files=omitted,
            attempt=attempt,
        )

        logger.debug(
            "Composed attempt %d: instruction=%d chars, context=%d chars, prompt=%d chars",
            attempt,
            len(composed.instruction),
            len(composed.context),
            len(composed.prompt),
        )
        return composed

    def compose_instruction(
        self,
        profile: ProjectProfile,
        kind: ReportKind = ReportKind.AUDIT,
        attempt: int = 1,
    ) -> str:
        """Compose the system instruction.

        Args:
            profile: Project profile
            kind: Report kind
            attempt: Attempt number (escalation is added when > 1)

        Returns:
            Instruction text within max_instruction_chars
        """
        selected = profile.detected_modules[: self.module_limit(profile.complexity)]
        budget = self.limits.max_instruction_chars

        text, dropped = self._instruction_builder(profile, kind, attempt, selected).render(budget)
        if dropped:
            logger.warning(
                "Instruction over %d chars; dropped sections: %s",
                budget,
                ", ".join(dropped),
            )
            # Restate only the modules whose blocks survived; the shorter
            # closing block keeps the same sections within budget.
            kept = [m for m in selected if f"module:{m.id}" not in dropped]
            text, _ = self._instruction_builder(profile, kind, attempt, kept).render(budget)
        return text

    def _instruction_builder(
        self,
        profile: ProjectProfile,
        kind: ReportKind,
        attempt: int,
        modules: Sequence[ModuleDescriptor],
    ) -> PromptBuilder:
        builder = PromptBuilder()
        builder.add("base", get_base_instruction(kind))
        builder.add("profile", build_profile_section(profile))
        for module in modules:
            builder.add(
                f"module:{module.id}",
                module.describe(),
                required=False,
                priority=module.priority,
            )
        builder.add("final_requirements", build_final_requirements([m.name for m in modules]))
        if attempt > 1:
            builder.add("escalation", build_escalation_block(attempt))
        return builder

    def compose_prompt(
        self,
        profile: ProjectProfile,
        user_instructions: str | None = None,
        kind: ReportKind = ReportKind.AUDIT,
    ) -> str:
        """Compose the analysis request.

        Args:
            profile: Project profile
            user_instructions: Free-form instructions from the caller
            kind: Report kind

        Returns:
            Prompt text within max_prompt_chars
        """
        builder = PromptBuilder()
        for name, text in build_analysis_prompt(profile, user_instructions, kind):
            builder.add(name, text)
        text, _ = builder.render(self.limits.max_prompt_chars)
        return text

    def compose_context(
        self,
        profile: ProjectProfile,
        files: Sequence[FileRecord],
    ) -> tuple[str, int]:
        """Concatenate prioritized files up to the context budget.

        Args:
            profile: Project profile (detected modules drive the ordering)
            files: All files of the project

        Returns:
            Tuple of (context text, number of omitted files)
        """
        budget = self.limits.max_context_chars
        ordered = prioritize_files(files, profile.detected_modules)

        blocks: list[str] = []
        used = 0
        for record in ordered:
            block = file_header(record) + record.content
            if used + len(block) > budget:
                break
            blocks.append(block)
            used += len(block)

        omitted = len(ordered) - len(blocks)
        if omitted == 0:
            return "".join(blocks), 0

        # Make room for the marker by dropping files from the tail
        while blocks and used + len(omission_marker(omitted)) > budget:
            used -= len(blocks.pop())
            omitted += 1

        context = "".join(blocks) + omission_marker(omitted)
        if len(context) > budget:
            context = context[:budget]

        logger.warning(
            "Context limit of %d chars reached: %d of %d files omitted",
            budget,
            omitted,
            len(ordered),
        )
        return context, omitted
