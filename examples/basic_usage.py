"""
Basic Usage Example

This example demonstrates the fundamentals of storing read models in
Elasticsearch:
- Defining a read model
- Creating a repository through a factory
- Saving, finding, filtering and removing read models
- Rebuilding an index behind an alias without downtime

Requires a running Elasticsearch cluster (ES_URL, default
http://localhost:9200).

Run with: python examples/basic_usage.py
"""

import asyncio
import logging
import time
from decimal import Decimal

from esreadmodels import (
    AliasingElasticsearchRepositoryFactory,
    ReadModel,
    check_connection,
    create_client,
)

# =============================================================================
# Step 1: Define a Read Model
# =============================================================================
# Read models are denormalized views shaped for the queries the
# application runs. Fields used in exact-match filters are declared as
# not analyzed when the repository is created.


class OrderSummary(ReadModel):
    """Summary of an order, one document per order."""

    order_number: str
    customer_name: str
    status: str
    total_amount: Decimal


# =============================================================================
# Step 2: Work with the Repository
# =============================================================================


async def main():
    logging.basicConfig(level=logging.INFO)

    client = create_client()
    if not await check_connection(client):
        print("Elasticsearch is not reachable, set ES_URL")
        await client.close()
        return

    try:
        factory = AliasingElasticsearchRepositoryFactory(client)
        orders = factory.create("example_orders", OrderSummary, ["status", "customer_name"])

        # First generation of the index, already behind the alias
        suffix = f"_{int(time.time())}"
        healthy = await orders.create_index_with_alias(suffix)
        print(f"Created {orders.physical_index_name(suffix)} (healthy: {healthy})")

        await orders.save(
            OrderSummary(
                id="o-1",
                order_number="ORD-001",
                customer_name="Alice",
                status="pending",
                total_amount=Decimal("25.00"),
            )
        )
        await orders.save(
            OrderSummary(
                id="o-2",
                order_number="ORD-002",
                customer_name="Bob",
                status="shipped",
                total_amount=Decimal("99.90"),
            )
        )

        summary = await orders.find("o-1")
        print(f"Found: {summary}")

        shipped = await orders.find_by({"status": "shipped"})
        print(f"Shipped orders: {[o.order_number for o in shipped]}")

        print(f"Missing order: {await orders.find('o-404')}")

        # =====================================================================
        # Step 3: Rebuild Behind the Alias
        # =====================================================================
        # Fill a new physical index while readers keep using the old one,
        # then move the alias in a single request.

        new_suffix = f"{suffix}_rebuild"
        rebuild = orders.physical_repository(new_suffix)
        await rebuild.create_index()
        for order in await orders.find_all():
            order.status = order.status.upper()
            await rebuild.save(order)

        retired = await orders.switch_to_new_index(new_suffix)
        print(f"Alias now points at {orders.physical_index_name(new_suffix)}, retired {retired}")
        print(f"Statuses after rebuild: {[o.status for o in await orders.find_all()]}")

        await orders.remove("o-1")
        await orders.remove("o-1")  # Removing twice is fine
        print(f"Remaining: {[o.id for o in await orders.find_all()]}")

        # Clean up the example index
        await rebuild.delete_index()
    finally:
        await client.close()


if __name__ == "__main__":
    asyncio.run(main())
