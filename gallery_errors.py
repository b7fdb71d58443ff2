class GalleryError(Exception):
    """Base gallery error"""


class ConfigError(GalleryError):
    """Missing or invalid configuration"""


class ManifestError(GalleryError):
    """Gallery manifest could not be read or validated"""


class RenderError(GalleryError):
    """Painting a gallery presentation failed"""


class AssetLoadError(GalleryError):
    """An image source could not be opened"""
