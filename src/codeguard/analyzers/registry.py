"""Analysis module registry.

The registry is a fixed, ordered catalog of ModuleDescriptors. Each entry is
plain data (id, predicate, priority, weight, instruction text), so a new
analysis lens is added by appending a record, not by subclassing.

Registry order matters: it breaks priority ties when modules are sorted.
The registry is read-only after construction and safe to share between
concurrent analysis requests.
"""

from collections.abc import Iterable, Iterator

from codeguard.analyzers.detectors import (
    any_of,
    content_matches,
    extension_in,
    file_count_above,
    never,
    path_matches,
)
from codeguard.models.profile import ModuleDescriptor

_JS_TS = (".js", ".jsx", ".ts", ".tsx", ".mjs", ".cjs")
_BACKEND_SOURCE = (*_JS_TS, ".py", ".go", ".java", ".rb", ".php", ".kt", ".rs")

# Framework imports that identify a backend service
BACKEND_FRAMEWORK_PATTERN = (
    r"(?:require\(['\"]|from ['\"]|import ['\"])(?:express|koa|fastify|@nestjs/|hapi)"
    r"|^\s*(?:from|import)\s+(?:flask|fastapi|django|starlette|aiohttp|tornado)\b"
    r"|\"github\.com/(?:gin-gonic/gin|gofiber/fiber|labstack/echo)"
    r"|org\.springframework"
)

# File extensions that identify a UI layer
UI_EXTENSIONS = (".jsx", ".tsx", ".vue", ".svelte")


# =============================================================================
# Module instruction blocks
# =============================================================================

SECURITY_BLOCK = """
## MODULE: BACKEND SECURITY
- Trace every authentication and authorization path. Flag missing checks,
  IDOR exposure and privilege escalation with the exact handler location.
- Flag hardcoded secrets, tokens and credentials by file:line. Never echo the
  secret value itself.
- Flag injection sinks (SQL, command, template, XSS) and name the untrusted
  input that reaches them.
- Flag weak hashing (MD5/SHA1 for passwords), missing rate limiting and
  permissive CORS. State the exposure, e.g. "unauthenticated access to 14
  admin endpoints".
"""

DATABASE_BLOCK = """
## MODULE: DATABASE PERFORMANCE
- Identify N+1 query patterns and report the query multiplier
  ("1+N queries, 101 queries for 100 users").
- Identify unindexed lookups, full-table scans and over-fetching
  (SELECT * or loading whole collections) with estimated latency.
- Check transaction boundaries and connection pool sizing.
- Every database finding MUST state the query count, rows scanned or
  latency in ms.
"""

API_BLOCK = """
## MODULE: BACKEND API
- Review route handlers and controllers for blocking work on the request
  path, missing pagination, chatty endpoints and unbounded payloads.
- Check error handling: leaked stack traces, swallowed errors, missing
  timeouts on outbound calls.
- Report latency impact per request ("adds 450ms p95 to GET /orders").
"""

REACT_BLOCK = """
## MODULE: FRONTEND RENDERING
- Identify unnecessary re-renders (unstable props, inline objects, missing
  memoization) and count them ("47 re-renders per keystroke").
- Flag effects with missing or excessive dependencies, data fetching inside
  render loops and oversized bundles.
- Flag large lists rendered without virtualization with their item counts.
"""

STATE_BLOCK = """
## MODULE: FRONTEND STATE MANAGEMENT
- Review store, context and reducer design for over-broad subscriptions and
  global state that forces app-wide re-renders.
- Flag duplicated server state, stale caches and derived state stored
  instead of computed.
- Quantify the blast radius: how many components re-render per update.
"""

ASYNC_BLOCK = """
## MODULE: ASYNC & CONCURRENCY
- Find sequential awaits that could run in parallel and state the wasted
  time ("3 sequential calls of 200ms = 600ms instead of 200ms").
- Flag unhandled promise rejections, fire-and-forget tasks, race conditions
  on shared state and missing cancellation.
- Flag polling loops and busy waits with their interval and cost.
"""

INFRA_BLOCK = """
## MODULE: INFRASTRUCTURE & DEPLOYMENT
- Review Dockerfiles, compose files, Kubernetes manifests and Terraform for
  over-provisioned resources, missing limits and insecure defaults.
- Estimate monthly cost impact in USD using standard cloud pricing.
- Flag images running as root, unpinned base images and missing health checks.
"""

SCALABILITY_BLOCK = """
## MODULE: SCALABILITY & STRUCTURE
- Identify god objects, circular dependencies and modules with excessive
  fan-in that will not survive growth.
- Identify in-memory state that blocks horizontal scaling.
- Estimate the load at which each bottleneck breaks ("saturates at ~200 req/s").
"""

TESTING_BLOCK = """
## MODULE: TEST COVERAGE & QUALITY
- Map critical paths that have no tests and name the files.
- Flag brittle tests (sleeps, shared fixtures, network calls) and slow suites
  with their duration.
"""

GENERAL_BLOCK = """
## MODULE: GENERAL CODE QUALITY
- Review overall structure, error handling, duplication and naming.
- Identify the three riskiest files and explain the concrete failure mode of
  each with a measurable impact.
"""


# =============================================================================
# Default catalog
# =============================================================================

DEFAULT_MODULES: tuple[ModuleDescriptor, ...] = (
    ModuleDescriptor(
        id="backend_security",
        name="Backend Security",
        priority=10,
        weight=1.0,
        detect=any_of(
            path_matches(r"(?:^|/)(?:auth|security|middleware)(?:/|\.|$)"),
            content_matches(
                r"\b(?:jwt|jsonwebtoken|bcrypt|passport|oauth|password_hash|"
                r"session\[|SECRET_KEY|API_KEY)\b",
                _BACKEND_SOURCE,
            ),
        ),
        instruction_block=SECURITY_BLOCK,
        focus_pattern=r"auth|security|middleware",
    ),
    ModuleDescriptor(
        id="backend_database",
        name="Database Performance",
        priority=9,
        weight=0.9,
        detect=any_of(
            path_matches(r"(?:^|/)(?:models|repositories|migrations)/|schema\.prisma$|\.sql$"),
            content_matches(
                r"\b(?:prisma|sequelize|mongoose|typeorm|knex|sqlalchemy|"
                r"psycopg2?|pymongo|gorm|SELECT\s+.+\s+FROM)\b",
                (*_BACKEND_SOURCE, ".sql"),
            ),
        ),
        instruction_block=DATABASE_BLOCK,
        focus_pattern=r"models|repositories|schema|prisma|migrations",
    ),
    ModuleDescriptor(
        id="backend_api",
        name="Backend API",
        priority=8,
        weight=0.8,
        detect=any_of(
            path_matches(r"(?:^|/)(?:routes|controllers|handlers|api)/"),
            content_matches(BACKEND_FRAMEWORK_PATTERN, _BACKEND_SOURCE),
        ),
        instruction_block=API_BLOCK,
        focus_pattern=r"routes|controllers|handlers|api",
    ),
    ModuleDescriptor(
        id="frontend_react",
        name="Frontend Rendering",
        priority=8,
        weight=0.8,
        detect=any_of(
            extension_in((".jsx", ".tsx")),
            content_matches(r"from ['\"]react['\"]", _JS_TS),
        ),
        instruction_block=REACT_BLOCK,
        focus_pattern=r"components|pages|app\.tsx|index\.tsx",
    ),
    ModuleDescriptor(
        id="frontend_state",
        name="Frontend State Management",
        priority=7,
        weight=0.7,
        detect=any_of(
            path_matches(r"(?:^|/)(?:store|stores|state|context|reducers)/"),
            content_matches(
                r"\b(?:createContext|useReducer|createStore|configureStore|"
                r"zustand|redux|mobx|recoil|jotai)\b",
                _JS_TS,
            ),
        ),
        instruction_block=STATE_BLOCK,
        focus_pattern=r"store|state|context|redux|zustand",
    ),
    ModuleDescriptor(
        id="async_concurrency",
        name="Async & Concurrency",
        priority=6,
        weight=0.6,
        detect=content_matches(
            r"\bawait\b|\bPromise\.all\b|\bgo func\b|\bthreading\.|\basyncio\.|"
            r"\bsetInterval\(|\bExecutorService\b",
            _BACKEND_SOURCE,
        ),
        instruction_block=ASYNC_BLOCK,
        focus_pattern=r"workers?|jobs|queue|tasks|services",
    ),
    ModuleDescriptor(
        id="infrastructure",
        name="Infrastructure & Deployment",
        priority=6,
        weight=0.5,
        detect=path_matches(
            r"(?:^|/)(?:Dockerfile|docker-compose\.ya?ml|serverless\.ya?ml)$"
            r"|\.tf$|(?:^|/)(?:k8s|kubernetes|helm|deploy)/"
        ),
        instruction_block=INFRA_BLOCK,
        focus_pattern=r"docker|\.tf$|k8s|kubernetes|helm|deploy",
    ),
    ModuleDescriptor(
        id="scalability",
        name="Scalability & Structure",
        priority=5,
        weight=0.5,
        detect=any_of(
            file_count_above(20),
            path_matches(r"(?:^|/)(?:services|packages|apps|microservices)/"),
        ),
        instruction_block=SCALABILITY_BLOCK,
        focus_pattern=r"services|core|shared|lib",
    ),
    ModuleDescriptor(
        id="testing_quality",
        name="Test Coverage & Quality",
        priority=4,
        weight=0.3,
        detect=path_matches(
            r"(?:^|/)(?:tests?|__tests__|spec)/|\.(?:test|spec)\.[jt]sx?$|(?:^|/)test_[^/]+\.py$"
        ),
        instruction_block=TESTING_BLOCK,
        focus_pattern=None,
    ),
)

FALLBACK_MODULE = ModuleDescriptor(
    id="general_quality",
    name="General Code Quality",
    priority=1,
    weight=0.5,
    detect=never,
    instruction_block=GENERAL_BLOCK,
    focus_pattern=None,
)


class ModuleRegistry:
    """Ordered, read-only catalog of analysis modules.

    Adding a new module:
        1. Write a detection predicate from the builders in analyzers.detectors
        2. Write its instruction block
        3. Append a ModuleDescriptor to the catalog
        4. No changes needed to the profiler or composer

    Attributes:
        fallback: Module used when no predicate matches
    """

    def __init__(
        self,
        modules: Iterable[ModuleDescriptor] = DEFAULT_MODULES,
        fallback: ModuleDescriptor = FALLBACK_MODULE,
    ) -> None:
        """Initialize the registry.

        Args:
            modules: Descriptors in registry order
            fallback: Module used when no predicate matches

        Raises:
            ValueError: If module ids are not unique
        """
        self._modules: tuple[ModuleDescriptor, ...] = tuple(modules)
        self.fallback = fallback

        ids = [m.id for m in self._modules] + [fallback.id]
        duplicates = sorted({i for i in ids if ids.count(i) > 1})
        if duplicates:
            raise ValueError(f"Duplicate module ids: {duplicates}")

    def __iter__(self) -> Iterator[ModuleDescriptor]:
        return iter(self._modules)

    def __len__(self) -> int:
        return len(self._modules)

    @property
    def modules(self) -> tuple[ModuleDescriptor, ...]:
        """Descriptors in registry order (fallback excluded)."""
        return self._modules

    def ids(self) -> list[str]:
        """Get module ids in registry order."""
        return [m.id for m in self._modules]

    def get(self, module_id: str) -> ModuleDescriptor:
        """Get a module by id.

        Args:
            module_id: Module identifier (the fallback id is accepted)

        Returns:
            Matching ModuleDescriptor

        Raises:
            KeyError: If the module is not registered
        """
        if module_id == self.fallback.id:
            return self.fallback
        for module in self._modules:
            if module.id == module_id:
                return module
        raise KeyError(f"Module '{module_id}' not registered. Available: {self.ids()}")


# Shared registry instance
_registry: ModuleRegistry | None = None


def default_registry() -> ModuleRegistry:
    """Get the shared default registry instance.

    Returns:
        Global ModuleRegistry instance
    """
    global _registry
    if _registry is None:
        _registry = ModuleRegistry()
    return _registry
