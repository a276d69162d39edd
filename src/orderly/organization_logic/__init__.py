"""
Organization logic module: categorization, planning and orchestration.
"""
