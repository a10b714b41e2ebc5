"""
SRTM Services

Business logic for the SRTM toolkit:

- recommendation: STIG family recommendation engine, catalog and weights
- stig: STIG document parsers, local STIG library, detailed requirements
- categorization: FIPS 199 impact and NIST SP 800-53B baseline selection
- workflow: workflow and SRTM project files
- traceability: requirement coverage and dashboard figures

Submodules are imported directly (``from srtm.services.workflow import
load_workflow``) so that importing one service does not load the others.
"""
