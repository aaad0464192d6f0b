# scholarstream/services/scholarships.py
import logging
import re

from pymongo import ASCENDING, DESCENDING

from ..db import check_field_names, parse_object_id
from ..errors import NotFound

logger = logging.getLogger(__name__)

SEARCHABLE_FIELDS = ("scholarshipName", "universityName", "degree")
EXACT_FILTERS = ("subjectCategory", "scholarshipCategory", "degree")


def build_search_filter(query):
    """Translate a ScholarshipQuery into a MongoDB filter document."""
    filt = {}
    if query.search:
        pattern = re.escape(query.search.strip())
        filt["$or"] = [{field: {"$regex": pattern, "$options": "i"}} for field in SEARCHABLE_FIELDS]
    for field in EXACT_FILTERS:
        value = getattr(query, field)
        if value:
            filt[field] = value
    return filt


def _without_ids(fields):
    check_field_names(fields)
    return {k: v for k, v in fields.items() if k not in ("_id", "id")}


def build_sort(query):
    direction = ASCENDING if query.sortOrder == "asc" else DESCENDING
    return [(query.sortField, direction)]


class ScholarshipCatalog:
    def __init__(self, store, latest_limit=8, max_page_size=50):
        self.store = store
        self.latest_limit = latest_limit
        self.max_page_size = max_page_size

    @property
    def collection(self):
        return self.store.scholarships

    def create(self, data):
        # the store assigns the ObjectId
        document = _without_ids(data)
        result = self.collection.insert_one(document)
        logger.info("Scholarship created", extra={"scholarship_id": str(result.inserted_id)})
        return result.inserted_id

    def update(self, scholarship_id, fields):
        oid = parse_object_id(scholarship_id)
        fields = _without_ids(fields)
        if fields:
            result = self.collection.update_one({"_id": oid}, {"$set": fields})
            if result.matched_count == 0:
                raise NotFound("Scholarship not found")
        return self.get(scholarship_id)

    def delete(self, scholarship_id):
        result = self.collection.delete_one({"_id": parse_object_id(scholarship_id)})
        if result.deleted_count == 0:
            raise NotFound("Scholarship not found")
        logger.info("Scholarship deleted", extra={"scholarship_id": scholarship_id})

    def list_all(self):
        return list(self.collection.find())

    def search(self, query):
        return list(self.collection.find(build_search_filter(query)).sort(build_sort(query)))

    def latest(self, limit=None):
        if limit is None:
            limit = self.latest_limit
        limit = max(1, min(int(limit), self.max_page_size))
        return list(self.collection.find().sort("postDate", DESCENDING).limit(limit))

    def find(self, scholarship_id):
        return self.collection.find_one({"_id": parse_object_id(scholarship_id)})

    def get(self, scholarship_id):
        doc = self.find(scholarship_id)
        if not doc:
            raise NotFound("Scholarship not found")
        return doc
