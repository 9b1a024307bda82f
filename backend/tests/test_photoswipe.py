"""
Built-in PhotoSwipe component
"""

import pytest

from ambientimpact_core.plugins.photoswipe import ICON_KEYS, PhotoSwipe


@pytest.fixture
def registry(make_service):
    return make_service(use_registration_table=True).create_registry()


@pytest.fixture
def photoswipe(registry) -> PhotoSwipe:
    return registry.get_instance("photoswipe")


def test_photoswipe_is_registered(registry):
    definition = registry.get_definition("photoswipe")

    assert definition.provider == "ambientimpact_core"
    assert definition.title == "PhotoSwipe"
    assert definition.component_class is PhotoSwipe


def test_default_configuration(photoswipe):
    configuration = photoswipe.get_configuration()

    assert configuration["id"] == "photoswipe"
    assert configuration["icons"]["photoswipe"] == {key: key for key in ICON_KEYS}
    assert configuration["linkedImageAttributes"] == {
        "width": "data-linked-width",
        "height": "data-linked-height",
    }


def test_js_settings(registry, photoswipe):
    settings = registry.collect_js_settings()["photoswipe"]

    assert set(settings) == {"icons", "linkedImageAttributes"}
    assert settings == photoswipe.get_js_settings()


def test_replace_icons_removes_keys_from_other_bundles(photoswipe):
    photoswipe.replace_icons({"my_theme": {"close": "x-mark", "share": "share-alt"}})

    icons = photoswipe.get_configuration()["icons"]
    assert icons["my_theme"] == {"close": "x-mark", "share": "share-alt"}
    assert "close" not in icons["photoswipe"]
    assert "share" not in icons["photoswipe"]
    assert icons["photoswipe"]["zoom-in"] == "zoom-in"


def test_alter_image_formatter_elements(photoswipe):
    elements = [{"item_attributes": {"class": "image"}}, {}]
    items = [{"width": 800, "height": 600}, {"width": 20, "height": 10}]

    photoswipe.alter_image_formatter_elements(elements, items)

    assert elements[0]["item_attributes"] == {
        "class": "image",
        "data-linked-width": 800,
        "data-linked-height": 600,
    }
    assert elements[1]["item_attributes"] == {"data-linked-width": 20, "data-linked-height": 10}


def test_shipped_libraries(photoswipe):
    libraries = photoswipe.get_libraries()

    vendor = libraries["photoswipe.vendor"]
    assert "ambientimpact_core/framework" not in vendor.get("dependencies", [])
    assert "components/photoswipe/vendor/photoswipe.min.js" in vendor["js"]

    main = libraries["photoswipe"]
    assert main["dependencies"][-1] == "ambientimpact_core/framework"
    assert main["js"]["components/photoswipe/photoswipe.js"]["attributes"]["defer"] is True


def test_shipped_template(registry):
    html = registry.collect_html()

    assert html["photoswipe"].startswith('<div class="pswp"')
    assert "photoswipe" in registry.get_component_names_with_html()
