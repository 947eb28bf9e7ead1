#!/usr/bin/env python3
"""
Quick Start Guide for xmlx.

This example walks through loading a document, querying it by qualified
name, and writing it back out with different layouts.
"""

import json
import sys
from pathlib import Path

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from xmlx import Document, SerializerConfig, XMLSyntaxError, parse_string
from xmlx.api import get_adapter

CATALOG = """<?xml version="1.0" encoding="UTF-8" standalone="no"?>
<!-- Sample catalog -->
<catalog xmlns="urn:example:catalog" xmlns:pr="urn:example:pricing">
  <book id="123" genre="fiction">
    <title>My Book</title>
    <author>John Doe</author>
    <pr:price currency="USD">19.99</pr:price>
  </book>
  <book id="456" genre="poetry">
    <title>Verses &amp; Lines</title>
    <author>Jane Roe</author>
    <pr:price currency="EUR">12.50</pr:price>
  </book>
</catalog>
"""


def quick_start_example():
    """Quick start example showing basic usage."""

    print("🚀 QUICK START - xmlx")
    print("=" * 45)

    # Step 1: Load a document
    print("\n📄 Step 1: Loading XML")
    print("-" * 30)

    document = parse_string(CATALOG)
    print(f"✅ Loaded document, standalone={document.standalone!r}")
    print(f"🏷️  Namespace aliases: {dict(document.namespaces)}")


    # Step 2: Query by qualified name
    print("\n🔍 Step 2: Queries")
    print("-" * 30)

    # The default namespace is rewritten to the empty alias
    catalog = document.select_node("", "catalog")
    for book in catalog.select_nodes("", "book"):
        title = book.select_node("", "title").text
        price = book.select_node("pr", "price")
        print(
            f"📖 {book.get_attribute('', 'id')}: '{title}' "
            f"{price.get_attribute('', 'currency')} {price.text}"
        )

    prices = document.select_nodes_recursive("pr", "price")
    print(f"💰 {len(prices)} prices found anywhere in the document")


    # Step 3: Write it back out
    print("\n🔄 Step 3: Saving")
    print("-" * 30)

    print("📋 Pretty XML:")
    print(document.save_string(SerializerConfig.pretty()))

    print("📋 Minified first book:")
    print(catalog.select_node("", "book").to_bytes().decode("utf-8"))

    print("\n📋 Tree snapshot of the first title:")
    print(json.dumps(catalog.select_node("", "book").select_node("", "title").to_dict(), indent=2))


def entities_example():
    """Example showing custom and extended entities."""

    print("\n\n🔤 ENTITIES EXAMPLE")
    print("=" * 40)

    document = Document(entity={"product": "xmlx"})
    document.load_string("<p>&product; says hello</p>")
    print(f"Custom entity: {document.select_node('', 'p').text}")

    try:
        document.load_string("<p>&copy; 2024</p>")
    except XMLSyntaxError as e:
        print(f"Without the extended map: {e}")

    document.load_extended_entity_map()
    document.load_string("<p>&copy; 2024</p>")
    print(f"With the extended map: {document.select_node('', 'p').text}")


def adapters_example():
    """Example showing conversion to lxml."""

    print("\n\n🔌 ADAPTERS EXAMPLE")
    print("=" * 35)

    adapter = get_adapter("lxml")
    if adapter is None:
        print("lxml is not available")
        return

    result = adapter.to_target(parse_string(CATALOG))
    if result.success:
        print(f"lxml root tag: {result.converted_data.tag}")
        print(f"Converted in {result.conversion_time_ms:.2f}ms")
    else:
        print(f"❌ Failed: {result.errors}")


def main():
    """Main function."""
    quick_start_example()
    entities_example()
    adapters_example()
    return 0


if __name__ == "__main__":
    sys.exit(main())
