from gelf_manager.config.managerspec import ManagerSpec, load_spec, save_spec

__all__ = ["ManagerSpec", "load_spec", "save_spec"]
