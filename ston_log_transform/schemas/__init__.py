"""
Schema definitions sub-package for ston-log-transform.

Contains YAML files that define the ordered field list of each known
log format/version. The loader module (schema_registry.py in the parent
package) reads these files at runtime.
"""
