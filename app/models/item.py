"""
Item model for the canonical price-list catalogue.
Every column is text, named exactly as the accounting export names it.
"""

from sqlalchemy import Column, Integer, Text, DateTime
from sqlalchemy.sql import func
from app.core.database import Base


# (canonical header, attribute name) in storage order; the identifier comes first.
ITEM_COLUMNS = [
    ("Item Number", "item_number"),
    ("Item Name", "item_name"),
    ("Buy", "buy"),
    ("Sell", "sell"),
    ("Inventory", "inventory"),
    ("Asset Acct", "asset_acct"),
    ("Income Acct", "income_acct"),
    ("Expense/COS Acct", "expense_cos_acct"),
    ("Description", "description"),
    ("Use Desc. On Invoice", "use_desc_on_invoice"),
    ("Primary Supplier", "primary_supplier"),
    ("Supplier Item Number", "supplier_item_number"),
    ("Tax Code When Bought", "tax_code_when_bought"),
    ("Buy Unit Measure", "buy_unit_measure"),
    ("No. Items/Buy Unit", "no_items_buy_unit"),
    ("Reorder Quantity", "reorder_quantity"),
    ("Minimum Level", "minimum_level"),
    ("Selling Price", "selling_price"),
    ("Sell Unit Measure", "sell_unit_measure"),
    ("Tax Code When Sold", "tax_code_when_sold"),
    ("Sell Price Inclusive", "sell_price_inclusive"),
    ("No. Items/Sell Unit", "no_items_sell_unit"),
    ("Inactive Item", "inactive_item"),
    ("Standard Cost", "standard_cost"),
]

CANONICAL_HEADERS = [header for header, _ in ITEM_COLUMNS]
ATTRIBUTE_BY_HEADER = dict(ITEM_COLUMNS)


class Item(Base):
    """
    Item model - one row per accounting item.

    Table: items
    Keyed by the unique "Item Number"; all other columns are free text as
    exported. created_at is refreshed on every upsert.
    """
    __tablename__ = "items"

    id = Column(Integer, primary_key=True, autoincrement=True)
    item_number = Column("Item Number", Text, nullable=False, unique=True, index=True)
    item_name = Column("Item Name", Text)
    buy = Column("Buy", Text)
    sell = Column("Sell", Text)
    inventory = Column("Inventory", Text)
    asset_acct = Column("Asset Acct", Text)
    income_acct = Column("Income Acct", Text)
    expense_cos_acct = Column("Expense/COS Acct", Text)
    description = Column("Description", Text)
    use_desc_on_invoice = Column("Use Desc. On Invoice", Text)
    primary_supplier = Column("Primary Supplier", Text)
    supplier_item_number = Column("Supplier Item Number", Text)
    tax_code_when_bought = Column("Tax Code When Bought", Text)
    buy_unit_measure = Column("Buy Unit Measure", Text)
    no_items_buy_unit = Column("No. Items/Buy Unit", Text)
    reorder_quantity = Column("Reorder Quantity", Text)
    minimum_level = Column("Minimum Level", Text)
    selling_price = Column("Selling Price", Text)
    sell_unit_measure = Column("Sell Unit Measure", Text)
    tax_code_when_sold = Column("Tax Code When Sold", Text)
    sell_price_inclusive = Column("Sell Price Inclusive", Text)
    no_items_sell_unit = Column("No. Items/Sell Unit", Text)
    inactive_item = Column("Inactive Item", Text)
    standard_cost = Column("Standard Cost", Text)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    def __repr__(self):
        return f"<Item(item_number='{self.item_number}', name='{self.item_name}')>"
