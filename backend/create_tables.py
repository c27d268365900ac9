#!/usr/bin/env python3
"""
Script to create database tables and the search index.
"""
import sys
from pathlib import Path

# Add the backend directory to Python path
backend_dir = Path(__file__).parent
sys.path.insert(0, str(backend_dir))

from studydocs.database import create_tables
import studydocs.models  # noqa: F401  registers every model on Base.metadata
from studydocs.search.service import initialize_search_index

def main():
    """Create all database tables and the search index."""
    try:
        print("Creating database tables...")
        create_tables()
        print("✅ Database tables created successfully!")
    except Exception as e:
        print(f"❌ Error creating tables: {e}")
        return 1

    print("Creating search index...")
    if initialize_search_index():
        print("✅ Search index ready!")
    else:
        print("⚠️ Search index not created (search disabled or Elasticsearch unreachable)")
    return 0

if __name__ == "__main__":
    sys.exit(main())
