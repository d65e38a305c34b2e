"""
Test the project metadata.
"""

from pathlib import Path

import pytest

tomllib = pytest.importorskip('tomllib')

PYPROJECT = Path(__file__).resolve().parent.parent / 'pyproject.toml'


@pytest.fixture
def project():
    with open(PYPROJECT, 'rb') as f:
        return tomllib.load(f)['project']


class TestProjectMetadata:

    def test_no_readme_pointing_at_design_notes(self, project):
        """Package description must not be the internal design notes."""
        assert 'readme' not in project

    def test_runtime_dependencies(self, project):
        names = {dep.split('>')[0].split('=')[0].strip() for dep in project['dependencies']}
        assert {'numpy', 'scipy', 'pandas', 'joblib'} <= names
