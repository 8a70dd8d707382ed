"""Analysis and export pipelines of the medical report analyzer."""
