"""
Address templating for remote sources.

Every address is plain string templating over the project root; nothing
here touches the network or validates that a file exists.
"""

from scriptbundle.config import Settings
from scriptbundle.model import ScriptPaths


def file_address(root: str, group: str, script: str, file_name: str, extension: str = "py") -> str:
    """Address of one file: "{root}/{group}/{script}/{file_name}.{extension}"."""
    return f"{root}/{group}/{script}/{file_name}.{extension}"


def describe_paths(settings: Settings, group: str, script: str) -> ScriptPaths:
    """
    Compute the addresses consumed while bundling one requested script.

    Args:
        settings: Resolved settings (root directory, file names, extension)
        group: Group the requested script belongs to
        script: Requested script name

    Returns:
        ScriptPaths with entry, sibling, helper and project addresses
    """
    root = settings.root_directory
    ext = settings.file_extension
    return ScriptPaths(
        entry=file_address(root, group, script, settings.entry_file, ext),
        sibling=file_address(root, group, script, settings.sibling_file, ext),
        helpers=f"{root}/{settings.helper_path}.{ext}",
        project=root,
        extension=ext,
    )


__all__ = ["describe_paths", "file_address"]
