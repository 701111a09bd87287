#!/usr/bin/env python3
"""
Connection Test Script

Run this to verify the MongoDB connection and the object storage config.
Usage: python scripts/test_connections.py
"""

from jobboard.core.config import get_settings
from jobboard.db.mongodb import init_mongo_indexes, test_mongo_connection


def main():
    settings = get_settings()
    print("=" * 50)
    print("JOB BOARD - CONNECTION TEST")
    print("=" * 50)

    # Test MongoDB
    print("\n[1] Testing MongoDB...")
    print(f"    URI: {settings.mongodb_uri}")
    print(f"    Database: {settings.mongodb_db}")
    if test_mongo_connection():
        print("    ✅ MongoDB: CONNECTED")
        init_mongo_indexes()
        print("    ✅ MongoDB: indexes ensured")
    else:
        print("    ❌ MongoDB: FAILED")

    # Cloudinary credentials (uploads fail without them)
    print("\n[2] Checking object storage...")
    if settings.storage_configured:
        print(f"    Cloud name: {settings.cloudinary_cloud_name}")
        print("    ✅ Cloudinary: CONFIGURED")
    else:
        print("    ⚠️  Cloudinary: credentials not set, file uploads will fail")

    print("\n" + "=" * 50)
    print("Connection test complete!")
    print("=" * 50)


if __name__ == "__main__":
    main()
