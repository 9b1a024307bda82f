"""
Registry: definitions, lazy instances, aggregation and provider paths
"""

import pytest

from ambientimpact_core.core.component_registry import camelize_component_id
from ambientimpact_core.core.modules import ModuleHandler

from tests.helpers import (
    DemoComponent,
    LayeredComponent,
    PlainComponent,
    SettingsComponent,
    TEST_PROVIDER,
    make_definition,
    write_component_assets,
)


class CountingComponent(PlainComponent):
    constructed = 0

    def __init__(self, *args, **kwargs):
        type(self).constructed += 1
        super().__init__(*args, **kwargs)


def test_unknown_component_returns_none_without_constructing(make_service):
    CountingComponent.constructed = 0
    registry = make_service([make_definition("known", CountingComponent)]).create_registry()

    assert registry.get_definition("missing") is None
    assert registry.get_instance("missing") is None
    assert registry.get_configuration("missing") == {}
    assert CountingComponent.constructed == 0


def test_instances_are_memoized(make_service):
    registry = make_service([make_definition("foo")]).create_registry()

    first = registry.get_instance("foo")
    second = registry.get_instance("foo")

    assert first is second
    assert first.get_configuration() is second.get_configuration()


def test_configuration_layers_merge_with_override_precedence(make_service):
    registry = make_service([make_definition("layered", LayeredComponent)]).create_registry()

    instance = registry.get_instance("layered", {"c": 5})

    assert instance.get_configuration() == {"a": 1, "b": 3, "c": 5}


def test_default_path_and_base_configuration(make_service):
    registry = make_service([make_definition("foo")]).create_registry()

    instance = registry.get_instance("foo")

    assert instance.get_path() == "components/foo"
    assert instance.get_configuration() == {"id": "foo"}


@pytest.mark.parametrize(
    "component_id, expected",
    [
        ("photoswipe", "photoswipe"),
        ("image_viewer.lightbox", "imageViewer.lightbox"),
        ("image_viewer.sub_component", "imageViewer.subComponent"),
        ("a_b_c", "aBC"),
    ],
)
def test_camelize_component_id(component_id, expected):
    assert camelize_component_id(component_id) == expected


def test_js_settings_skip_empty_components(make_service):
    registry = make_service([
        make_definition("plain_one"),
        make_definition("slide_show.fancy_pager", SettingsComponent),
    ]).create_registry()

    assert registry.collect_js_settings() == {"slideShow.fancyPager": {"speed": 250}}


def test_html_aggregation_skips_components_without_templates(make_service, provider_root):
    write_component_assets(provider_root, "with_html", template="<p>hi</p>")
    write_component_assets(provider_root, "empty_html", template="")
    registry = make_service([
        make_definition("no_template"),
        make_definition("empty_html"),
        make_definition("with_html"),
    ]).create_registry()

    assert registry.collect_html() == {"withHtml": "<p>hi</p>"}
    assert registry.get_component_names_with_html() == ["emptyHtml", "withHtml"]


def test_aggregation_follows_discovery_order(make_service):
    registry = make_service([
        make_definition("zeta", SettingsComponent),
        make_definition("alpha", SettingsComponent),
    ]).create_registry()

    assert list(registry.collect_js_settings()) == ["zeta", "alpha"]


def test_definitions_are_cached_across_registries(make_service):
    service = make_service([make_definition("foo")])
    service.create_registry().get_definitions()

    service.discovery.static_definitions.append(make_definition("bar"))

    assert list(service.create_registry().get_definitions()) == ["foo"]

    service.invalidate_tags(["library_info"])

    assert list(service.create_registry().get_definitions()) == ["foo", "bar"]


def test_clear_cached_definitions_forgets_instances(make_service):
    registry = make_service([make_definition("foo")]).create_registry()
    instance = registry.get_instance("foo")

    registry.clear_cached_definitions()

    assert registry.get_instance("foo") is not instance


def test_has_demo_only_when_overridden(make_service):
    registry = make_service([
        make_definition("plain"),
        make_definition("demo", DemoComponent),
    ]).create_registry()

    assert registry.get_instance("plain").has_demo() is False
    assert registry.get_instance("demo").has_demo() is True
    assert registry.get_instance("demo").get_demo() == {"title": "Demo"}


def test_html_endpoint_path_comes_from_settings(make_service):
    registry = make_service().create_registry()

    assert registry.html_endpoint_path == "/api/components/html"


def test_component_paths_without_filters_lists_each_provider_once(make_service, provider_root):
    registry = make_service([
        make_definition("one"),
        make_definition("two"),
    ]).create_registry()

    assert registry.resolve_component_paths() == [str(provider_root / "components")]


def test_component_paths_match_exact_and_wildcard_filters(settings, make_service, tmp_path):
    roots = {
        "foo_bar": tmp_path / "foo_bar",
        "foo_baz": tmp_path / "foo_baz",
        "bar_foo": tmp_path / "bar_foo",
    }
    settings.PROVIDER_ROOTS = {name: str(path) for name, path in roots.items()}
    service = make_service([
        make_definition("a", provider="foo_bar"),
        make_definition("b", provider="foo_baz"),
        make_definition("c", provider="bar_foo"),
    ])
    registry = service.create_registry()

    assert registry.resolve_component_paths(["foo_*"]) == [
        str(roots["foo_bar"] / "components"),
        str(roots["foo_baz"] / "components"),
    ]
    assert registry.resolve_component_paths(["bar_foo"]) == [
        str(roots["bar_foo"] / "components"),
    ]


def test_component_paths_skip_inactive_providers(make_service):
    service = make_service([make_definition("one")])
    registry = service.create_registry()
    registry.get_definitions()

    registry.context.module_handler = ModuleHandler({})

    assert registry.resolve_component_paths([TEST_PROVIDER]) == []


def test_components_from_inactive_providers_are_not_discovered(make_service):
    registry = make_service([
        make_definition("active"),
        make_definition("orphan", provider="not_installed"),
    ]).create_registry()

    assert list(registry.get_definitions()) == ["active"]
    assert registry.get_instance("orphan") is None
