import importlib

mod = "autodisco"
class LazyLoader:
    """
    Lazy loader for the autodisco functions to speed up startup time.
    """
    def __init__(self, mappings):
        self._modules = {}
        self._mappings = mappings

    def _load_module(self, module_name):
        if module_name not in self._modules:
            self._modules[module_name] = importlib.import_module(module_name)
        return self._modules[module_name]

    def __getattr__(self, item):
        if item in self._mappings:
            module_name, func_name = self._mappings[item]
            module = self._load_module(module_name)
            return getattr(module, func_name)
        else:
            return self._load_module(f"{mod}.{item}")

# Define the functions and their corresponding module paths
_mappings = {
    "infer_type": (f"{mod}.schema_inference", "infer_type"),
    "unify_array": (f"{mod}.schema_inference", "unify_array"),
    "merge_schemas": (f"{mod}.schema_inference", "merge_schemas"),
    "merge_types": (f"{mod}.schema_inference", "merge_types"),
    "infer_from_samples": (f"{mod}.schema_inference", "infer_from_samples"),
    "fingerprint": (f"{mod}.common", "fingerprint"),
    "emit": (f"{mod}.nodewriter", "emit"),
    "emit_module": (f"{mod}.nodewriter", "emit_module"),
    "EmitterOptions": (f"{mod}.nodewriter", "EmitterOptions"),
    "convert_node_to_json_schema": (f"{mod}.nodetojsons", "convert_node_to_json_schema"),
    "convert_json_to_typescript": (f"{mod}.jsontotypes", "convert_json_to_typescript"),
    "convert_json_to_zod": (f"{mod}.jsontotypes", "convert_json_to_zod"),
    "convert_json_to_json_schema": (f"{mod}.jsontotypes", "convert_json_to_json_schema"),
    "discover": (f"{mod}.discover", "discover"),
}

__all__ = list(_mappings)

_lazy_loader = LazyLoader(_mappings)

def __getattr__(name):
    return getattr(_lazy_loader, name)
