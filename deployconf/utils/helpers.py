import os


def create_dirs(path: str) -> None:
    """
    Create all parent directories for a given path.

    Args:
        path: File path for which to create parent directories
    """
    directory = os.path.dirname(path)
    if directory:
        os.makedirs(directory, exist_ok=True)


def placeholder_names(template: str, pattern) -> list[str]:
    """
    List the placeholder names of a template in order of appearance.

    Args:
        template: String possibly containing placeholders
        pattern: Compiled regex whose first group captures the name

    Returns:
        Names without duplicates, first occurrence wins
    """
    names = []
    for match in pattern.finditer(template):
        name = match.group(1)
        if name not in names:
            names.append(name)
    return names
