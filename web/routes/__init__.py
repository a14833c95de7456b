"""
API route package

Router modules:
- health: health check
- journal: accounting journal and financial summary
"""
