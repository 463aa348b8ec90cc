from bson import ObjectId

HIDDEN_FIELDS = {"password"}

def serialize_doc(doc: dict | None) -> dict | None:
    """
    Map a Mongo document to an API-friendly dict: `_id` becomes `id`,
    ObjectIds become strings and secrets are dropped.
    """
    if doc is None:
        return None
    out = {}
    for key, value in doc.items():
        if key in HIDDEN_FIELDS:
            continue
        if key == "_id":
            key = "id"
        out[key] = _convert(value)
    return out

def serialize_docs(docs) -> list:
    return [serialize_doc(d) for d in docs]

def _convert(value):
    if isinstance(value, ObjectId):
        return str(value)
    if isinstance(value, dict):
        return serialize_doc(value)
    if isinstance(value, list):
        return [_convert(v) for v in value]
    return value
