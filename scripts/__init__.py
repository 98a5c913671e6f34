"""
Maintenance Scripts

Available scripts:
    - seed_data.py: Stores the built-in workflow definitions
    - validate_workflow.py: Prints the transition flow and validation report of a definition

Usage:
    python -m scripts.seed_data
    python scripts/validate_workflow.py small_change
"""
