"""
Library info alter subscribers
"""

from ambientimpact_core.config.settings import Settings
from ambientimpact_core.core.modules import ModuleHandler
from ambientimpact_core.services.component_service import ComponentService
from ambientimpact_core.services.library_info import CORE_MODERNIZR_PATH, MODERNIZR_VERSION

from tests.helpers import TEST_PROVIDER, make_definition, write_component_assets


def core_libraries():
    return {
        "modernizr": {
            "version": "3.3.1",
            "header": True,
            "js": {CORE_MODERNIZR_PATH: {"preprocess": False, "weight": -21}},
        },
        "drupal": {"js": {"misc/drupal.js": {}}},
    }


def ship_modernizr(provider_root):
    build = provider_root / CORE_MODERNIZR_PATH
    build.parent.mkdir(parents=True)
    build.write_text("/* modernizr */", encoding="utf-8")


def test_component_libraries_registered_with_their_provider(make_service, provider_root):
    write_component_assets(provider_root, "foo", libraries={"foo": {"js": {"foo.js": {}}}})
    service = make_service([make_definition("foo")])

    libraries = service.get_library_info(TEST_PROVIDER, {"base": {"js": {"base.js": {}}}})

    assert set(libraries) == {"base", "foo"}
    assert "components/foo/foo.js" in libraries["foo"]["js"]


def test_component_libraries_not_added_to_other_extensions(make_service, provider_root):
    write_component_assets(provider_root, "foo", libraries={"foo": {"js": {"foo.js": {}}}})
    service = make_service([make_definition("foo")])

    assert service.get_library_info("ambientimpact_core", {}) == {}
    assert service.get_library_info("some_theme", {}) == {}


def test_libraries_split_across_providers(settings, make_service, provider_root, tmp_path):
    other_root = tmp_path / "other_provider"
    write_component_assets(provider_root, "foo", libraries={"foo": {"js": {"foo.js": {}}}})
    write_component_assets(other_root, "bar", libraries={"bar": {"js": {"bar.js": {}}}})
    settings.PROVIDER_ROOTS = {TEST_PROVIDER: str(provider_root), "other_provider": str(other_root)}
    service = make_service([
        make_definition("foo"),
        make_definition("bar", provider="other_provider"),
    ])

    assert list(service.get_library_info(TEST_PROVIDER)) == ["foo"]
    assert list(service.get_library_info("other_provider")) == ["bar"]


def test_core_modernizr_replaced_relative_to_web_root(make_service, settings, tmp_path):
    provider_root = tmp_path / "modules" / "ambientimpact_core"
    ship_modernizr(provider_root)
    settings.WEB_ROOT = str(tmp_path)
    settings.PROVIDER_ROOTS = {"ambientimpact_core": str(provider_root)}
    service = make_service()
    original = core_libraries()

    libraries = service.get_library_info("core", original)

    ours = f"../modules/ambientimpact_core/{CORE_MODERNIZR_PATH}"
    js = libraries["modernizr"]["js"]
    assert list(js) == [ours]
    assert js[ours] == {"preprocess": False, "weight": -21}
    assert libraries["modernizr"]["version"] == MODERNIZR_VERSION
    assert libraries["drupal"] == original["drupal"]
    assert original == core_libraries()


def test_default_settings_give_web_relative_provider_path():
    settings = Settings(_env_file=None)

    module = ModuleHandler.from_settings(settings).get_module("ambientimpact_core")

    assert module.web_path == "ambientimpact_core"


def test_default_settings_leave_core_modernizr_without_build():
    service = ComponentService(Settings(_env_file=None))

    assert service.get_library_info("core", core_libraries()) == core_libraries()


def test_provider_outside_web_root_leaves_core_modernizr(make_service, settings, tmp_path):
    provider_root = tmp_path / "elsewhere" / "ambientimpact_core"
    ship_modernizr(provider_root)
    settings.WEB_ROOT = str(tmp_path / "web")
    settings.PROVIDER_ROOTS = {"ambientimpact_core": str(provider_root)}
    service = make_service()

    assert service.get_library_info("core", core_libraries()) == core_libraries()


def test_altered_modernizr_left_alone(make_service):
    service = make_service()
    libraries = {"modernizr": {"js": {"libraries/modernizr/custom.js": {}}}}

    assert service.get_library_info("core", libraries) == libraries


def test_modernizr_only_touched_for_core(make_service):
    service = make_service()

    assert service.get_library_info("not_core", core_libraries()) == core_libraries()
