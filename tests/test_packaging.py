import re
from pathlib import Path

ROOT = Path(__file__).resolve().parent.parent


def test_readme_is_the_project_readme():
    pyproject = (ROOT / "pyproject.toml").read_text(encoding="utf-8")
    match = re.search(r'^readme\s*=\s*"([^"]+)"', pyproject, re.MULTILINE)

    assert match and match.group(1) == "README.md"
    assert (ROOT / "README.md").read_text(encoding="utf-8").startswith("# QuizMaster")
