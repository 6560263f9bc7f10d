# Schemas package init
"""
Pydantic request/response models. Request bodies derive from
common.StrictRequest and reject unknown fields.
"""
