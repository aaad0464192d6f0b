from .store import Store, check_field_names, parse_object_id, to_public

__all__ = ["Store", "check_field_names", "parse_object_id", "to_public"]
