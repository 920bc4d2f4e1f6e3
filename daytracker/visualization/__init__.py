"""
Visualization package - Plotly charts for the day dashboard.
"""

from .charts import create_category_donut, create_duration_bar, create_day_timeline

__all__ = ['create_category_donut', 'create_duration_bar', 'create_day_timeline']
