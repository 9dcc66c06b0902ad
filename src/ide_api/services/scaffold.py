"""Project templates written after a new top-level folder is created."""
import loguru

from .workspace_service import WorkspaceService

_WEB_INDEX = """<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="UTF-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <title>{name}</title>
    <link rel="stylesheet" href="css/style.css">
</head>
<body>
    <h1>{name}</h1>
    <script src="js/script.js"></script>
</body>
</html>
"""

_WEB_STYLE = """body {
    font-family: system-ui, sans-serif;
    margin: 2rem;
}
"""

_WEB_SCRIPT = """document.addEventListener('DOMContentLoaded', () => {
    console.log('Ready');
});
"""

_PYTHON_MAIN = '''def main():
    print("Hello from {name}!")


if __name__ == "__main__":
    main()
'''

TEMPLATES: dict[str, dict[str, str]] = {
    "blank": {},
    "web": {
        "index.html": _WEB_INDEX,
        "css/style.css": _WEB_STYLE,
        "js/script.js": _WEB_SCRIPT,
        "README.md": "# {name}\n\nOpen `index.html` in a browser.\n",
    },
    "python": {
        "main.py": _PYTHON_MAIN,
        "requirements.txt": "",
        "README.md": "# {name}\n\nRun with `python main.py`.\n",
    },
}


async def apply_template(project: WorkspaceService, template: str, name: str) -> list[str]:
    """
    Write a template's files into a freshly created project.

    Args:
        project: Service scoped to the project folder
        template: Template key in ``TEMPLATES``
        name: Project name substituted into file contents

    Returns:
        Relative paths of the files written
    """
    written = []
    for relative_path, body in TEMPLATES[template].items():
        created = await project.create_file(relative_path, body.replace("{name}", name))
        written.append(created.path)
    loguru.logger.info(f"Scaffolded {template!r} template into {project.root} ({len(written)} files)")
    return written
