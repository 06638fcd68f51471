"""CodeGuard - Adaptive Code Audit.

CodeGuard profiles a codebase, composes a model request tailored to the
analysis modules it detects, and scores the returned report against a
weighted quality rubric.

Core principles:
- Deterministic-First: profiling and composition never call a model
- Bounded Input: every prompt text respects a configured character budget
- Measurable Output: reports are scored for specificity and quantification
"""

__version__ = "0.1.0"
__author__ = "CodeGuard Contributors"
