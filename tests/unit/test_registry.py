"""Unit tests for the module registry and detection predicates."""

import pytest

from codeguard.analyzers import DEFAULT_MODULES, FALLBACK_MODULE, ModuleRegistry, default_registry
from codeguard.analyzers.detectors import (
    any_of,
    content_matches,
    extension_in,
    file_count_above,
    never,
    path_matches,
)
from codeguard.models import ModuleDescriptor
from tests.fixtures import make_files, make_sized_files


class TestDetectors:
    """Tests for predicate builders."""

    def test_path_matches_is_case_insensitive(self) -> None:
        """Test path regex ignores case."""
        detect = path_matches(r"(?:^|/)models/")

        assert detect(make_files({"app/Models/user.py": ""})) is True
        assert detect(make_files({"app/views.py": ""})) is False

    def test_extension_in(self) -> None:
        """Test extension membership."""
        detect = extension_in((".TSX",))

        assert detect(make_files({"src/App.tsx": ""})) is True
        assert detect(make_files({"src/app.ts": ""})) is False

    def test_content_matches_respects_extensions(self) -> None:
        """Test content search is limited to the given extensions."""
        detect = content_matches(r"\bsqlalchemy\b", (".py",))

        assert detect(make_files({"db.py": "import sqlalchemy"})) is True
        assert detect(make_files({"notes.md": "import sqlalchemy"})) is False

    def test_content_matches_all_files_without_extensions(self) -> None:
        """Test content search covers every file when unrestricted."""
        detect = content_matches(r"TODO")

        assert detect(make_files({"notes.md": "TODO: fix"})) is True

    def test_file_count_above(self) -> None:
        """Test strict file count threshold."""
        detect = file_count_above(3)

        assert detect(make_sized_files(3)) is False
        assert detect(make_sized_files(4)) is True

    def test_any_of_and_never(self) -> None:
        """Test predicate combination."""
        files = make_sized_files(1)

        assert any_of(never, file_count_above(0))(files) is True
        assert any_of(never, never)(files) is False
        assert never(files) is False


class TestDefaultCatalog:
    """Tests for the built-in module catalog."""

    def test_ids_are_unique(self) -> None:
        """Test every default module has a unique id."""
        ids = [m.id for m in DEFAULT_MODULES]

        assert len(ids) == len(set(ids))
        assert FALLBACK_MODULE.id not in ids

    def test_every_module_has_instruction_text(self) -> None:
        """Test modules carry an instruction block with a header."""
        for module in (*DEFAULT_MODULES, FALLBACK_MODULE):
            assert module.describe().strip().startswith("## MODULE:")

    def test_fallback_never_detects(self) -> None:
        """Test the fallback module is only used explicitly."""
        assert FALLBACK_MODULE.detect(make_sized_files(200)) is False
        assert FALLBACK_MODULE.priority == 1

    def test_database_detection(self) -> None:
        """Test the database module detects ORM usage."""
        module = default_registry().get("backend_database")

        assert module.detect(make_files({"repo.ts": "import { PrismaClient } from 'prisma'"}))
        assert module.detect(make_files({"db/schema.prisma": "model User {}"}))
        assert not module.detect(make_files({"README.txt": "prisma"}))

    def test_infrastructure_detection(self) -> None:
        """Test the infrastructure module detects deployment files."""
        module = default_registry().get("infrastructure")

        assert module.detect(make_files({"Dockerfile": "FROM node"}))
        assert module.detect(make_files({"deploy/main.tf": ""}))
        assert not module.detect(make_files({"src/docker.py": ""}))

    def test_security_detection(self) -> None:
        """Test the security module detects auth code."""
        module = default_registry().get("backend_security")

        assert module.detect(make_files({"src/auth/login.ts": ""}))
        assert module.detect(make_files({"app.py": "token = jwt.encode(payload)"}))


class TestModuleRegistry:
    """Tests for ModuleRegistry."""

    def test_iteration_preserves_order(self) -> None:
        """Test registry iterates in construction order."""
        registry = ModuleRegistry()

        assert [m.id for m in registry] == [m.id for m in DEFAULT_MODULES]
        assert len(registry) == len(DEFAULT_MODULES)

    def test_get_known_and_fallback(self) -> None:
        """Test lookup by id, including the fallback."""
        registry = ModuleRegistry()

        assert registry.get("frontend_react").name == "Frontend Rendering"
        assert registry.get("general_quality") is FALLBACK_MODULE

    def test_get_unknown_raises(self) -> None:
        """Test unknown ids raise KeyError."""
        with pytest.raises(KeyError, match="not registered"):
            ModuleRegistry().get("blockchain")

    def test_duplicate_ids_raise(self) -> None:
        """Test duplicate ids are rejected."""
        dup = ModuleDescriptor(id="x", name="X", priority=5, weight=0.5, detect=never)

        with pytest.raises(ValueError, match="Duplicate module ids"):
            ModuleRegistry([dup, dup])

    def test_duplicate_of_fallback_raises(self) -> None:
        """Test a module may not reuse the fallback id."""
        clash = ModuleDescriptor(
            id=FALLBACK_MODULE.id, name="X", priority=5, weight=0.5, detect=never
        )

        with pytest.raises(ValueError, match="Duplicate module ids"):
            ModuleRegistry([clash])

    def test_custom_catalog(self) -> None:
        """Test a registry built from custom descriptors."""
        custom = ModuleDescriptor(
            id="graphql",
            name="GraphQL",
            priority=7,
            weight=0.6,
            detect=path_matches(r"\.graphql$"),
        )
        registry = ModuleRegistry([custom])

        assert registry.ids() == ["graphql"]
        assert registry.fallback.id == "general_quality"

    def test_default_registry_is_shared(self) -> None:
        """Test the default registry is a singleton."""
        assert default_registry() is default_registry()
