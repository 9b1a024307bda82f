"""
PhotoSwipe component
Provides a wrapper component around PhotoSwipe.
"""

from typing import Any, Dict, List, Mapping, MutableMapping, Sequence

from ambientimpact_core.core.component_base import ComponentBase
from ambientimpact_core.core.component_discovery import component

ICON_KEYS = (
    "close",
    "fullscreen-enter",
    "fullscreen-exit",
    "zoom-in",
    "zoom-out",
    "share",
    "arrow-left",
    "arrow-right",
)


@component(
    id="photoswipe",
    title="PhotoSwipe",
    description="Provides a wrapper component around PhotoSwipe.",
)
class PhotoSwipe(ComponentBase):
    """
    PhotoSwipe image viewer.

    Icons are grouped in bundles. The front-end picks the first bundle that
    defines an icon, so replacing icons should go through replace_icons(),
    which removes the keys from the other bundles.
    """

    def default_configuration(self) -> Dict[str, Any]:
        return {
            "icons": {
                # Icon key -> icon code within the bundle.
                "photoswipe": {key: key for key in ICON_KEYS},
            },
            "linkedImageAttributes": {
                "width": "data-linked-width",
                "height": "data-linked-height",
            },
        }

    def get_js_settings(self) -> Dict[str, Any]:
        return {
            "icons": self.configuration["icons"],
            "linkedImageAttributes": self.configuration["linkedImageAttributes"],
        }

    def replace_icons(self, new_icons: Mapping[str, Mapping[str, str]]) -> None:
        """
        Replace icons with those from one or more new bundles.

        new_icons uses the same shape as the 'icons' configuration: bundle
        name -> icon key -> icon code.
        """
        icons = self.configuration["icons"]

        for new_bundle_name, new_bundle_icons in new_icons.items():
            for icon_key in new_bundle_icons:
                for bundle_icons in icons.values():
                    bundle_icons.pop(icon_key, None)

            icons[new_bundle_name] = dict(new_bundle_icons)

    def alter_image_formatter_elements(
        self,
        elements: List[MutableMapping[str, Any]],
        items: Sequence[Mapping[str, Any]],
    ) -> None:
        """Add the linked image dimensions to each formatted image element."""
        attribute_map = self.configuration["linkedImageAttributes"]

        for delta, item in enumerate(items):
            item_attributes = elements[delta].setdefault("item_attributes", {})
            for dimension in ("width", "height"):
                item_attributes[attribute_map[dimension]] = item[dimension]
