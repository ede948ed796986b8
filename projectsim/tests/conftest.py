import matplotlib

matplotlib.use("Agg")

import pytest

from projectsim.project_templates import ProjectTemplates
from projectsim.utils import activity_table_from_dataframe


@pytest.fixture
def reference_df():
    return ProjectTemplates.get_template("Reference Network (Default)")


@pytest.fixture
def reference_table(reference_df):
    return activity_table_from_dataframe(reference_df)
