#!/usr/bin/env python3
"""
Create the Elasticsearch 'courses' index with the course mapping.
The API also does this at startup; use this when the index must be (re)created by hand:
  python scripts/create_es_courses_index.py
  python scripts/create_es_courses_index.py --reset-index

Reads ELASTICSEARCH_URL / COURSES_INDEX from .env (default http://localhost:9200, courses).
"""

import argparse
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from coursefinder.search.elasticsearch_client import (
    COURSES_INDEX,
    courses_index_mappings,
    sync_es_client,
)


def main():
    ap = argparse.ArgumentParser(description="Create the courses index")
    ap.add_argument("--reset-index", action="store_true", help="Delete the courses index first, then recreate it")
    args = ap.parse_args()

    es = sync_es_client()
    exists = es.indices.exists(index=COURSES_INDEX)
    if exists and args.reset_index:
        es.indices.delete(index=COURSES_INDEX)
        print(f"Deleted index '{COURSES_INDEX}'.")
    elif exists:
        print(f"Index '{COURSES_INDEX}' already exists. Pass --reset-index to recreate it.")
        return

    es.indices.create(
        index=COURSES_INDEX,
        settings={"index": {"number_of_replicas": 0}},
        mappings=courses_index_mappings(),
    )
    print(f"Created index '{COURSES_INDEX}' with number_of_replicas=0.")


if __name__ == "__main__":
    main()
