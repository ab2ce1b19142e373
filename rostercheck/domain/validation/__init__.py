from rostercheck.domain.validation.validator import RosterValidator, ValidationOptions, validate_roster

__all__ = ["RosterValidator", "ValidationOptions", "validate_roster"]
