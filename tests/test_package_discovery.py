"""
Tests for the discovery orchestrator — status mapping, isolation, progress.
"""

import asyncio
import json

from devjanitor.adapters.mock import MockCommandRunner, MockHandler
from devjanitor.adapters.managers import ALL_HANDLERS
from devjanitor.core.models.config import CustomConfig, UninstallOptions
from devjanitor.core.models.package import DiscoveryMethod, ManagerId, PackageRecord
from devjanitor.core.services.package_discovery import PackageDiscovery


def run(coro):
    return asyncio.run(coro)


def pkg(name: str, manager: ManagerId, version: str = "1.0") -> PackageRecord:
    return PackageRecord(name=name, version=version, manager=manager.value, location="mock")


def discovery_with(*handlers, **kwargs) -> PackageDiscovery:
    return PackageDiscovery(runner=MockCommandRunner(), handlers=list(handlers), **kwargs)


class TestDefaults:
    def test_all_builtin_handlers_registered(self, host_env):
        discovery = PackageDiscovery(runner=MockCommandRunner(), environment=host_env)
        assert discovery.registered_managers() == [cls.id for cls in ALL_HANDLERS]

    def test_handlers_share_one_search_and_cache(self, host_env):
        discovery = PackageDiscovery(runner=MockCommandRunner(), environment=host_env)
        for manager in discovery.registered_managers():
            handler = discovery.get_handler(manager)
            assert handler.path_search is discovery.path_search
        assert discovery.path_search.cache is discovery.cache

    def test_lookup_by_string(self, host_env):
        discovery = PackageDiscovery(runner=MockCommandRunner(), environment=host_env)
        assert discovery.get_handler("brew").id == ManagerId.BREW
        assert discovery.get_handler("nope") is None


class TestManagerStatus:
    def test_available(self):
        discovery = discovery_with(MockHandler(ManagerId.BREW))
        status = run(discovery.get_manager_status("brew"))
        assert status.status == "available"
        assert status.in_path is True
        assert status.discovery_method == DiscoveryMethod.DIRECT_COMMAND
        assert status.message is None

    def test_path_missing_has_remediation(self):
        discovery = discovery_with(MockHandler(ManagerId.CONDA, method=DiscoveryMethod.COMMON_PATH))
        status = run(discovery.get_manager_status("conda"))
        assert status.status == "path_missing"
        assert status.in_path is False
        assert status.found_path == "/mock/bin/conda"
        assert "not in PATH" in status.message
        assert "/mock/bin/conda" in status.message

    def test_custom_path_is_path_missing(self):
        discovery = discovery_with(MockHandler(ManagerId.PIPX, method=DiscoveryMethod.CUSTOM_PATH))
        assert run(discovery.get_manager_status("pipx")).status == "path_missing"

    def test_not_installed(self):
        discovery = discovery_with(MockHandler(ManagerId.PYENV, available=False))
        status = run(discovery.get_manager_status("pyenv"))
        assert status.status == "not_installed"
        assert status.found_path is None
        assert status.in_path is False

    def test_unregistered(self):
        discovery = discovery_with(MockHandler(ManagerId.BREW))
        assert run(discovery.get_manager_status("conda")).status == "not_installed"

    def test_check_error_is_not_installed(self):
        discovery = discovery_with(MockHandler(ManagerId.BREW, error=RuntimeError("exploded")))
        status = run(discovery.get_manager_status("brew"))
        assert status.status == "not_installed"
        assert "exploded" in status.message

    def test_disabled_in_config(self):
        handler = MockHandler(ManagerId.BREW)
        discovery = discovery_with(handler, custom_config=CustomConfig(disabled=["brew"]))
        status = run(discovery.get_manager_status("brew"))
        assert status.status == "not_installed"
        assert "disabled" in status.message
        assert handler.resolved_path is None

    def test_availability_cached(self):
        discovery = discovery_with(MockHandler(ManagerId.BREW), MockHandler(ManagerId.CONDA, available=False))
        run(discovery.discover_available_managers())
        assert discovery.cache.get_availability("brew") is True
        assert discovery.cache.get_availability("conda") is False

    def test_status_is_serializable(self):
        discovery = discovery_with(MockHandler(ManagerId.CONDA, method=DiscoveryMethod.COMMON_PATH))
        status = run(discovery.get_manager_status("conda"))
        data = json.loads(json.dumps(status.model_dump(mode="json")))
        assert data["discovery_method"] == "common_path"


class TestDiscoverAll:
    def test_one_status_per_manager_in_order(self):
        discovery = discovery_with(
            MockHandler(ManagerId.BREW),
            MockHandler(ManagerId.CONDA, error=RuntimeError("bad")),
            MockHandler(ManagerId.PIPX, available=False),
        )
        statuses = run(discovery.discover_available_managers())
        assert [(s.manager, s.status) for s in statuses] == [
            ("brew", "available"),
            ("conda", "not_installed"),
            ("pipx", "not_installed"),
        ]

    def test_checks_run_concurrently(self):
        started: list[str] = []
        release = asyncio.Event()

        class SlowHandler(MockHandler):
            async def check_availability(self):
                started.append(self.id)
                if len(started) == 2:
                    release.set()
                await asyncio.wait_for(release.wait(), timeout=2)
                return await super().check_availability()

        discovery = discovery_with(SlowHandler(ManagerId.BREW), SlowHandler(ManagerId.CONDA))
        statuses = run(discovery.discover_available_managers())
        assert [s.status for s in statuses] == ["available", "available"]


class TestListing:
    def test_list_packages(self):
        discovery = discovery_with(MockHandler(ManagerId.BREW, packages=[pkg("wget", ManagerId.BREW)]))
        assert [p.name for p in run(discovery.list_packages("brew"))] == ["wget"]

    def test_unavailable_lists_nothing(self):
        handler = MockHandler(ManagerId.BREW, available=False, packages=[pkg("wget", ManagerId.BREW)])
        discovery = discovery_with(handler)
        assert run(discovery.list_packages("brew")) == []
        assert handler.list_calls == 0

    def test_listing_error_is_empty(self):
        handler = MockHandler(ManagerId.BREW, list_error=RuntimeError("boom"))
        assert run(discovery_with(handler).list_packages("brew")) == []

    def test_unknown_manager_is_empty(self):
        assert run(discovery_with(MockHandler(ManagerId.BREW)).list_packages("apt")) == []

    def test_disabled_lists_nothing(self):
        handler = MockHandler(ManagerId.BREW, packages=[pkg("wget", ManagerId.BREW)])
        discovery = discovery_with(handler, custom_config=CustomConfig(disabled=["brew"]))
        assert run(discovery.list_packages("brew")) == []


class TestListAll:
    def test_partial_failure_isolation(self):
        discovery = discovery_with(
            MockHandler(ManagerId.BREW, packages=[pkg("wget", ManagerId.BREW)]),
            MockHandler(ManagerId.CONDA, list_error=RuntimeError("conda broke")),
            MockHandler(ManagerId.PIPX, packages=[pkg("black", ManagerId.PIPX)]),
        )
        packages = run(discovery.list_all_packages())
        assert [p.name for p in packages] == ["wget", "black"]

    def test_skips_not_installed(self):
        missing = MockHandler(ManagerId.CONDA, available=False, packages=[pkg("numpy", ManagerId.CONDA)])
        discovery = discovery_with(MockHandler(ManagerId.BREW), missing)
        run(discovery.list_all_packages())
        assert missing.list_calls == 0

    def test_path_missing_managers_are_listed(self):
        handler = MockHandler(
            ManagerId.CONDA, method=DiscoveryMethod.COMMON_PATH, packages=[pkg("numpy", ManagerId.CONDA)]
        )
        assert [p.name for p in run(discovery_with(handler).list_all_packages())] == ["numpy"]

    def test_progress_before_and_after_each_manager(self):
        events: list[tuple[str, str]] = []
        discovery = discovery_with(
            MockHandler(ManagerId.BREW, packages=[pkg("wget", ManagerId.BREW)]),
            MockHandler(ManagerId.CONDA, list_error=RuntimeError("conda broke")),
            MockHandler(ManagerId.PIPX, available=False),
        )

        run(discovery.list_all_packages(lambda manager, text: events.append((manager, text))))

        assert [m for m, _ in events] == ["brew", "brew", "conda", "conda"]
        assert "Found 1" in events[1][1]
        assert "conda broke" in events[3][1]

    def test_failing_progress_callback_does_not_abort(self):
        def explode(manager, text):
            raise ValueError("ui gone")

        discovery = discovery_with(MockHandler(ManagerId.BREW, packages=[pkg("wget", ManagerId.BREW)]))
        assert len(run(discovery.list_all_packages(explode))) == 1


class TestUninstall:
    def test_delegates_with_options(self):
        handler = MockHandler(ManagerId.BREW)
        options = UninstallOptions(cask=True)
        assert run(discovery_with(handler).uninstall_package("firefox", "brew", options))
        assert handler.uninstalled == [("firefox", options)]

    def test_unknown_manager(self):
        assert not run(discovery_with(MockHandler(ManagerId.BREW)).uninstall_package("x", "apt"))

    def test_handler_reports_failure(self):
        handler = MockHandler(ManagerId.BREW, uninstall_ok=False)
        assert not run(discovery_with(handler).uninstall_package("wget", "brew"))

    def test_exception_is_false(self):
        handler = MockHandler(ManagerId.BREW, error=RuntimeError("boom"))
        assert not run(discovery_with(handler).uninstall_package("wget", "brew"))

    def test_unavailable_manager(self):
        handler = MockHandler(ManagerId.BREW, available=False)
        assert not run(discovery_with(handler).uninstall_package("wget", "brew"))
        assert handler.uninstalled == []


class TestConfigAndCache:
    def test_load_custom_config_installs_it(self, tmp_path):
        config_file = tmp_path / "package-managers.json"
        config_file.write_text('{"customPaths": {"brew": ["/x/brew"]}, "timeout": 4000}')
        discovery = discovery_with(MockHandler(ManagerId.BREW))

        config = run(discovery.load_custom_config(config_file))

        assert config is not None
        assert discovery.custom_config is config
        assert discovery.path_search.timeout == 4.0

    def test_invalid_config_keeps_previous(self, tmp_path):
        config_file = tmp_path / "package-managers.json"
        config_file.write_text("{not json")
        previous = CustomConfig(disabled=["conda"])
        discovery = discovery_with(MockHandler(ManagerId.BREW), custom_config=previous)

        assert run(discovery.load_custom_config(config_file)) is None
        assert discovery.custom_config is previous

    def test_missing_config_file(self):
        discovery = discovery_with(MockHandler(ManagerId.BREW))
        assert run(discovery.load_custom_config()) is None
        assert discovery.custom_config is None

    def test_clear_cache(self):
        discovery = discovery_with(MockHandler(ManagerId.BREW))
        discovery.cache.set_path("brew", "/b")
        discovery.clear_cache()
        assert discovery.cache.size() == 0

    def test_clear_cache_forces_reprobe_before_uninstall(self, runner, host_env):
        runner.set_response("brew --version")
        runner.set_response("brew uninstall wget")
        discovery = PackageDiscovery(runner=runner, environment=host_env)
        run(discovery.get_manager_status("brew"))
        assert discovery.get_handler("brew").resolved_path == "brew"

        runner.reset()
        discovery.clear_cache()

        assert discovery.get_handler("brew").resolved_path is None
        assert not run(discovery.uninstall_package("wget", "brew"))
        assert not runner.calls_matching("brew uninstall")

    def test_lost_executable_clears_resolved_path(self, runner, host_env):
        runner.set_response("pipx --version")
        discovery = PackageDiscovery(runner=runner, environment=host_env)
        handler = discovery.get_handler("pipx")
        assert run(handler.check_availability())

        runner.reset()
        discovery.cache.clear()

        assert not run(handler.check_availability())
        assert handler.resolved_path is None


class TestEndToEnd:
    """Real handlers over a mocked process boundary."""

    def test_brew_on_path_conda_off_path(self, runner, host_env, tmp_path, make_file):
        conda = make_file(tmp_path / "home" / "miniconda3" / "bin" / "conda")
        runner.set_response("brew --version")
        runner.set_response("brew list --formula --versions", stdout="wget 1.21.4\n")
        runner.set_response("brew list --cask --versions", stdout="")
        runner.set_response(f"{conda} --version")
        runner.set_response(f"{conda} list --json", stdout='[{"name": "numpy", "version": "1.26.0"}]')
        discovery = PackageDiscovery(runner=runner, environment=host_env)

        statuses = {s.manager: s for s in run(discovery.discover_available_managers())}
        packages = run(discovery.list_all_packages())

        assert statuses["brew"].status == "available"
        assert statuses["conda"].status == "path_missing"
        assert statuses["conda"].found_path == conda
        assert statuses["pipx"].status == "not_installed"
        assert sorted((p.manager, p.name) for p in packages) == [("brew", "wget"), ("conda", "numpy")]
