#!/usr/bin/env python3
"""
create-serverless-stack: scaffold a new Serverless Stack project from a template
"""
import re
import sys
import logging
import argparse
from pathlib import Path
from typing import Dict, List

logger = logging.getLogger(__name__)

TEMPLATES_DIR = Path(__file__).resolve().parent.parent / "templates"
TEMPLATE_SUFFIX = ".template"
DEFAULT_TEMPLATE = "python"
DEFAULT_STACK_NAME = "my-stack"

# Files that can't ship under their real name inside a package
RENAMED_FILES = {
    "gitignore": ".gitignore",
}


def pascal_case(name: str) -> str:
    return "".join(part[:1].upper() + part[1:] for part in re.split(r"[-_\s]+", name) if part)


def snake_case(name: str) -> str:
    return re.sub(r"[-\s]+", "_", name).lower()


def build_replacements(app_name: str, stack_name: str) -> Dict[str, str]:
    """Placeholder values used in template file names and contents"""
    return {
        "%app-name%": app_name,
        "%stack-name%": stack_name,
        "%stack-name.PascalCased%": pascal_case(stack_name),
        "%stack-name.snake_cased%": snake_case(stack_name),
    }


def render(text: str, replacements: Dict[str, str]) -> str:
    for placeholder, value in replacements.items():
        text = text.replace(placeholder, value)
    return text


def list_templates() -> List[str]:
    return sorted(path.name for path in TEMPLATES_DIR.iterdir() if path.is_dir())


def target_path(relative: Path, replacements: Dict[str, str]) -> Path:
    """Map a template file path to its path in the generated project"""
    parts = [render(part, replacements) for part in relative.parts]

    name = parts[-1]
    if name.endswith(TEMPLATE_SUFFIX):
        name = name[:-len(TEMPLATE_SUFFIX)]
    parts[-1] = RENAMED_FILES.get(name, name)

    return Path(*parts)


def create_project(
    project_dir: str,
    template: str = DEFAULT_TEMPLATE,
    stack_name: str = DEFAULT_STACK_NAME,
    force: bool = False
) -> List[Path]:
    """
    Create a project from a template

    Args:
        project_dir: Directory to create; its name becomes the app name
        template: Name of a directory under templates/
        stack_name: Name of the first stack in the project
        force: Write into a directory that already has files in it

    Returns:
        Paths of the files that were written
    """
    template_dir = TEMPLATES_DIR / template
    if not template_dir.is_dir():
        raise ValueError(
            f"Unknown template '{template}'. Available templates: {', '.join(list_templates())}"
        )

    project_path = Path(project_dir).resolve()
    if project_path.exists() and any(project_path.iterdir()) and not force:
        raise FileExistsError(f"Directory {project_path} is not empty")

    replacements = build_replacements(project_path.name, stack_name)
    written = []

    for source in sorted(template_dir.rglob("*")):
        if not source.is_file():
            continue

        destination = project_path / target_path(source.relative_to(template_dir), replacements)
        destination.parent.mkdir(parents=True, exist_ok=True)
        destination.write_text(
            render(source.read_text(encoding="utf-8"), replacements),
            encoding="utf-8"
        )
        logger.debug(f"Created {destination}")
        written.append(destination)

    return written


def main(argv: List[str] = None):
    """create-serverless-stack entry point"""
    parser = argparse.ArgumentParser(description="Create a new Serverless Stack project")
    parser.add_argument(
        "project",
        help="Directory to create the project in"
    )
    parser.add_argument(
        "--template",
        default=DEFAULT_TEMPLATE,
        help=f"Project template to use (default: {DEFAULT_TEMPLATE})"
    )
    parser.add_argument(
        "--stack-name",
        default=DEFAULT_STACK_NAME,
        help=f"Name of the first stack (default: {DEFAULT_STACK_NAME})"
    )
    parser.add_argument(
        "--force",
        action="store_true",
        help="Create the project even if the directory is not empty"
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Show debug logging"
    )

    args = parser.parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO)

    try:
        files = create_project(
            args.project,
            template=args.template,
            stack_name=args.stack_name,
            force=args.force
        )
    except (ValueError, FileExistsError) as e:
        print(f"❌ {e}")
        sys.exit(1)

    print(f"✅ Created {len(files)} files in {args.project}")
    print("\nGet started:")
    print(f"  cd {args.project}")
    print("  pip install -r requirements.txt")
    print("  sst deploy")


if __name__ == "__main__":
    main()
