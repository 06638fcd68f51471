"""Prompt templates for report generation.

Holds the static text the composer assembles into a system instruction and
an analysis request. Nothing here reads files or talks to a model; every
builder is a pure function of the profile and the report kind.
"""

from codeguard.models.profile import ProjectProfile
from codeguard.models.report import FINDING_CATEGORIES, ReportKind

# =============================================================================
# Base instructions (one per report kind)
# =============================================================================

# Writing rules shared by every report kind
_COMMON_RULES = """
CRITICAL WRITING RULES - YOU MUST FOLLOW THESE:

1. Every finding names an exact location: "src/routes/users.ts:45" or
   "function getUserOrders". Never "somewhere in the backend".
2. Every impact is quantified: "2.5s per request", "$420/month",
   "47 re-renders per keystroke", "O(n²) over 10,000 rows".
3. Pattern names are technical: "N+1 Query Problem", "Prop Drilling",
   "Unbounded In-Memory Cache".
4. Suggestions are imperative. BANNED: "consider", "maybe", "could",
   "might want to", "perhaps".
5. Findings are ordered by severity, most severe first.
"""

AUDIT_INSTRUCTION = (
    """
You are CodeGuard, a Principal Engineer performing a production readiness audit.

Analyze the supplied codebase for high-risk hotspots, performance bottlenecks,
anti-patterns and architectural weaknesses. Output a JSON report matching the
response schema.
"""
    + _COMMON_RULES
)

ARCHITECTURE_INSTRUCTION = (
    """
You are a Principal Software Architect performing a comprehensive Architecture
Health Assessment.

Analyze the codebase structure, coupling, patterns and organization.

FOCUS AREAS:
1. Coupling & Cohesion: tight coupling, circular dependencies and god objects.
2. Layering: separation of presentation, logic and data.
3. Tech Debt: anti-patterns, obsolete libraries and spaghetti code.
4. Scalability: whether the structure supports growth.

Generate a Health Score (0-100) and scores for 5 dimensions (reliability,
scalability, maintainability, security, performance). Provide concrete
quick wins that yield high value with low effort.
"""
    + _COMMON_RULES
)

IMPACT_INSTRUCTION = (
    """
You are a Senior Engineer performing a Breaking Change Impact Analysis.

The target change or component is given in the user instructions. If no
target is given, identify the most critical core component and analyze the
impact of refactoring it.

FOCUS AREAS:
1. Dependency Graph: trace what imports or calls the target.
2. Blast Radius: severity of breaking this component.
3. Affected Flows: user-facing features that rely on it.
4. Refactor Plan: step-by-step guide to safe modification.
5. Testing: what must be regression tested.
"""
    + _COMMON_RULES
)

COST_INSTRUCTION = (
    """
You are a FinOps Cloud Architect performing a Cost Optimization Analysis.

Analyze the code for inefficient resource usage, memory leaks and expensive
infrastructure patterns.

FOCUS AREAS:
1. Compute Waste: inefficient algorithms, unnecessary polling, heavy jobs.
2. Storage/Database: N+1 queries, over-fetching, unindexed lookups.
3. Infrastructure: over-provisioned resources implied by Docker, Kubernetes
   or Terraform configuration.
4. External Calls: excessive calls to paid APIs.

Estimate the monthly waste in USD using standard cloud pricing and provide a
table of resources and their inefficiencies.
"""
    + _COMMON_RULES
)

SECURITY_INSTRUCTION = (
    """
You are a Lead Security Researcher performing a Vulnerability Scan.

Analyze the code for OWASP Top 10 vulnerabilities, exposed secrets and logic
flaws.

FOCUS AREAS:
1. Injection: SQL injection, XSS, command injection.
2. Auth: broken authentication, IDOR, weak hashing.
3. Secrets: hardcoded API keys, tokens, credentials (never repeat the value).
4. Config: insecure defaults, missing security headers, exposed stack traces.

For every vulnerability provide a unique id (VULN-001), severity, file/line
evidence and remediation code.
"""
    + _COMMON_RULES
)

BASE_INSTRUCTIONS: dict[ReportKind, str] = {
    ReportKind.AUDIT: AUDIT_INSTRUCTION,
    ReportKind.ARCHITECTURE: ARCHITECTURE_INSTRUCTION,
    ReportKind.IMPACT: IMPACT_INSTRUCTION,
    ReportKind.COST: COST_INSTRUCTION,
    ReportKind.SECURITY: SECURITY_INSTRUCTION,
}

# Required outputs listed in the analysis request, per report kind
REQUIRED_OUTPUTS: dict[ReportKind, tuple[str, ...]] = {
    ReportKind.AUDIT: (
        "High-Risk Hotspots (security, complexity, fragility)",
        "Performance Bottlenecks (with quantified impact)",
        "Anti-Patterns (code quality issues)",
        "Architectural Observations (system design)",
        "Optimized Code Example (for most critical issue, with BEFORE/AFTER)",
        "Executive Summary (2-3 sentences)",
    ),
    ReportKind.ARCHITECTURE: (
        "Health Score (0-100)",
        "Dimension Scores (reliability, scalability, maintainability, security, performance)",
        "Top Issues with severity",
        "Recommendations",
        "Quick Wins",
        "Executive Summary (2-3 sentences)",
    ),
    ReportKind.IMPACT: (
        "Target Symbol",
        "Direct and Indirect Dependencies",
        "Blast Radius (Critical, High, Medium or Low)",
        "Affected Flows",
        "Refactor Plan (ordered steps)",
        "Required Tests",
        "Executive Summary (2-3 sentences)",
    ),
    ReportKind.COST: (
        "Estimated Monthly Waste (USD)",
        "Top Savings with risk",
        "Resource Table",
        "Implementation Risk",
        "Executive Summary (2-3 sentences)",
    ),
    ReportKind.SECURITY: (
        "Vulnerabilities (id, severity, file, evidence, remediation)",
        "Secrets Found (location only)",
        "Hardening Checklist",
        "Executive Summary (2-3 sentences)",
    ),
}

_NAMED_CATEGORIES = ", ".join(f'"{c}"' for c in FINDING_CATEGORIES if c != "General")

CATEGORIZATION_RULE = (
    f"IMPORTANT: Categorize each finding as {_NAMED_CATEGORIES}. "
    'Use "General" only when no layer applies.'
)


# =============================================================================
# Instruction sections
# =============================================================================


def get_base_instruction(kind: ReportKind) -> str:
    """Get the role and rules block for a report kind."""
    return BASE_INSTRUCTIONS[kind].strip()


def build_profile_section(profile: ProjectProfile) -> str:
    """Summarize the project profile for the model.

    Args:
        profile: Project profile

    Returns:
        Profile section text
    """
    lines = [
        "# PROJECT PROFILE",
        f"Complexity: {profile.complexity.value}",
        f"Architecture: {profile.architecture}",
        f"Primary Language: {profile.primary_language}",
        f"Total Files: {profile.total_files}",
        f"Analysis Depth: {profile.analysis_depth.value.upper()}",
        "Detected Analysis Modules:",
    ]
    lines.extend(f"- {m.name} (Priority: {m.priority})" for m in profile.detected_modules)
    return "\n".join(lines)


def build_final_requirements(module_names: list[str]) -> str:
    """Restate the selected modules and the ordering rule.

    Args:
        module_names: Names of the modules whose blocks were included

    Returns:
        Final requirements section text
    """
    lines = ["# FINAL OUTPUT REQUIREMENTS"]
    if module_names:
        lines.append(f"Cover every selected module: {', '.join(module_names)}.")
    lines.extend(
        [
            "Order findings by severity, most severe first.",
            "Quantify every impact and name every location.",
            "Return STRICT JSON only, matching the response schema.",
        ]
    )
    return "\n".join(lines)


def build_escalation_block(attempt: int) -> str:
    """Build the stricter quality requirements appended on a retry.

    Args:
        attempt: Attempt number (2 or higher)

    Returns:
        Escalation section text
    """
    return f"""## QUALITY REQUIREMENTS (Retry Attempt {attempt})

CRITICAL - Your previous response failed validation. Follow these STRICTLY:

1. CATEGORIZATION IS MANDATORY:
   - Categorize every finding as {_NAMED_CATEGORIES}.
   - Do not use "General" unless absolutely necessary.

2. QUANTIFICATION IS MANDATORY:
   - Every hotspot impact MUST include numbers: "2.5s", "$2,040/year",
     "47 re-renders", "55x faster".
   - Every bottleneck reason MUST include complexity: "O(n²)",
     "1+N queries", "500ms per request".

3. SPECIFICITY IS REQUIRED:
   - Locations MUST be exact: "routes/users.ts:45".
   - Pattern names MUST be technical: "N+1 Query Problem".

4. OUTPUT MUST BE A SINGLE JSON OBJECT with every required field present.

Now retry the analysis with these quality standards."""


# =============================================================================
# Analysis request
# =============================================================================


def build_analysis_prompt(
    profile: ProjectProfile,
    user_instructions: str | None = None,
    kind: ReportKind = ReportKind.AUDIT,
) -> list[tuple[str, str]]:
    """Build the analysis request as ordered (name, text) parts.

    User instructions come first and are marked as highest priority. The
    composer joins the parts and enforces the prompt budget.

    Args:
        profile: Project profile
        user_instructions: Free-form instructions from the caller
        kind: Report kind

    Returns:
        Ordered list of (part name, text)
    """
    parts: list[tuple[str, str]] = [("header", "# ANALYSIS REQUEST")]

    if user_instructions and user_instructions.strip():
        parts.append(
            (
                "user_instructions",
                "## USER-SPECIFIC INSTRUCTIONS (HIGHEST PRIORITY)\n"
                "Address these points explicitly and FIRST in your findings:\n"
                f'"{user_instructions.strip()}"',
            )
        )

    modules = "\n".join(
        f"{idx}. {m.name} (Priority: {m.priority}/10)"
        for idx, m in enumerate(profile.detected_modules, start=1)
    )
    parts.append(
        (
            "modules",
            f"## DETECTED AREAS\nAnalyze these {len(profile.detected_modules)} "
            f"detected areas:\n{modules}",
        )
    )
    parts.append(("depth", f"## ANALYSIS DEPTH: {profile.analysis_depth.value.upper()}"))

    outputs = "\n".join(
        f"{idx}. {item}" for idx, item in enumerate(REQUIRED_OUTPUTS[kind], start=1)
    )
    parts.append(("outputs", f"## REQUIRED OUTPUT\n{outputs}"))

    if kind is ReportKind.AUDIT:
        parts.append(("categorization", CATEGORIZATION_RULE))

    parts.append(("format", "Return STRICT JSON only, no additional commentary."))
    return parts
