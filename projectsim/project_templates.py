# project_templates.py
import pandas as pd

from .model import NO_PREDECESSOR


class ProjectTemplates:
    """Collection of predefined activity networks"""

    @staticmethod
    def get_available_templates():
        """Return list of available template names"""
        return [
            "Reference Network (Default)",
            "Serial Chain",
            "Fan-In Network",
        ]

    @staticmethod
    def get_template(template_name):
        """Return DataFrame for specified template"""
        templates = {
            "Reference Network (Default)": ProjectTemplates._reference_network,
            "Serial Chain": ProjectTemplates._serial_chain,
            "Fan-In Network": ProjectTemplates._fan_in_network,
        }
        if template_name not in templates:
            raise ValueError(
                f"Unknown template '{template_name}'. "
                f"Available: {ProjectTemplates.get_available_templates()}"
            )
        return templates[template_name]()

    @staticmethod
    def _reference_network():
        """Seven activities, deterministic length 39 weeks along 1-2-4-6-7"""
        return pd.DataFrame({
            "Activity": [1, 2, 3, 4, 5, 6, 7],
            "Name": [
                "Requirements",
                "Design",
                "Procurement",
                "Prototype",
                "Integration",
                "Verification",
                "Handover",
            ],
            "Average_Duration": [6, 10, 14, 7, 10, 11, 5],
            "Percent_Uncertainty": [20, 50, 50, 30, 50, 40, 20],
            "Predecessor_1": [NO_PREDECESSOR, 1, 1, 2, 2, 2, 5],
            "Predecessor_2": [NO_PREDECESSOR, NO_PREDECESSOR, NO_PREDECESSOR, NO_PREDECESSOR, 3, 3, 6],
            "Predecessor_3": [NO_PREDECESSOR] * 5 + [4, NO_PREDECESSOR],
        })

    @staticmethod
    def _serial_chain():
        """Four activities in strict sequence"""
        return pd.DataFrame({
            "Activity": [1, 2, 3, 4],
            "Name": ["Survey", "Foundation", "Structure", "Finishing"],
            "Average_Duration": [3, 8, 12, 6],
            "Percent_Uncertainty": [10, 25, 25, 15],
            "Predecessor_1": [NO_PREDECESSOR, 1, 2, 3],
            "Predecessor_2": [NO_PREDECESSOR] * 4,
            "Predecessor_3": [NO_PREDECESSOR] * 4,
        })

    @staticmethod
    def _fan_in_network():
        """Three parallel workstreams merging into a final release"""
        return pd.DataFrame({
            "Activity": [1, 2, 3, 4],
            "Name": ["Backend", "Frontend", "Documentation", "Release"],
            "Average_Duration": [12, 12, 12, 2],
            "Percent_Uncertainty": [40, 40, 40, 10],
            "Predecessor_1": [NO_PREDECESSOR, NO_PREDECESSOR, NO_PREDECESSOR, 1],
            "Predecessor_2": [NO_PREDECESSOR, NO_PREDECESSOR, NO_PREDECESSOR, 2],
            "Predecessor_3": [NO_PREDECESSOR, NO_PREDECESSOR, NO_PREDECESSOR, 3],
        })
