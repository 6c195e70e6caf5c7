"""Export pipeline: range resolution, normalization, grouping and rendering."""
