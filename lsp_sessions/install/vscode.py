"""Visual Studio Marketplace helpers."""

MARKETPLACE_PACKAGE_URL = (
    "https://marketplace.visualstudio.com/_apis/public/gallery/"
    "publishers/{publisher}/vsextensions/{package}/latest/vspackage"
)


def format_vspackage_url(extension_name: str) -> str:
    """Download URL of the latest ``publisher.package`` extension build.

    Raises:
        ValueError: If the name is not of the form ``publisher.package``
    """
    parts = extension_name.split(".")
    if len(parts) != 2 or not all(parts):
        raise ValueError(
            f"Extension name must look like 'publisher.package', got {extension_name!r}"
        )
    publisher, package = parts
    return MARKETPLACE_PACKAGE_URL.format(publisher=publisher, package=package)
