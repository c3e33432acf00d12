import importlib

mod = "oasify"
class LazyLoader:
    """
    Lazy loader for the oasify functions to speed up startup time.
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
    "ModelToOasConverter": (f"{mod}.modeltooas", "ModelToOasConverter"),
    "convert_model_type_to_oas": (f"{mod}.modeltooas", "convert_model_type_to_oas"),
    "convert_model_to_oas_files": (f"{mod}.modeltooas", "convert_model_to_oas_files"),
    "convert_model_type_to_oas_files": (f"{mod}.modeltooas", "convert_model_type_to_oas_files"),
    "ReferenceRewriter": (f"{mod}.references", "ReferenceRewriter"),
    "rewrite_reference": (f"{mod}.references", "rewrite_reference"),
    "prepare_reference_name": (f"{mod}.references", "prepare_reference_name"),
    "get_extensions": (f"{mod}.extensions", "get_extensions"),
    "has_ref": (f"{mod}.common", "has_ref"),
    "has_choice": (f"{mod}.common", "has_choice"),
}

_lazy_loader = LazyLoader(_mappings)

def __getattr__(name):
    return getattr(_lazy_loader, name)
