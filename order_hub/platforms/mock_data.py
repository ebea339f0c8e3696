"""
Fixed order backlogs returned by the mock order source
"""

MOCK_ORDERS = {
    "amazon": [
        {
            "amazon_order_id": "AMZ-2024-001",
            "order_date": "2024-01-15T10:30:00Z",
            "status": "shipped",
            "buyer_name": "John Doe",
            "buyer_email": "john@example.com",
            "buyer_phone": "+91-9876543210",
            "items": [
                {
                    "asin": "B08N5WRWNW",
                    "title": "Diamond Huggie Hoop Earrings",
                    "quantity": 1,
                    "price": 3500,
                    "sku": "DHH-001"
                }
            ],
            "total_amount": 3500
        }
    ],
    "blinkit": [
        {
            "blinkit_order_id": "BLK-2024-001",
            "created_at": "2024-01-15T11:00:00Z",
            "order_status": "confirmed",
            "customer_name": "Jane Smith",
            "customer_email": "jane@example.com",
            "customer_phone": "+91-9876543211",
            "items": [
                {
                    "product_id": "BLK-001",
                    "product_name": "Golden Flutter Studs",
                    "quantity": 2,
                    "price": 1800,
                    "sku": "GFS-001"
                }
            ],
            "total_amount": 3600
        }
    ],
    "flipkart": [
        {
            "flipkart_order_id": "FLP-2024-001",
            "order_date": "2024-01-15T12:00:00Z",
            "status": "processing",
            "customer": {
                "name": "Mike Johnson",
                "email": "mike@example.com",
                "phone": "+91-9876543212"
            },
            "items": [
                {
                    "product_id": "FLP-001",
                    "title": "Pearl Drape Drops",
                    "quantity": 1,
                    "price": 2600,
                    "sku": "PDD-001"
                }
            ],
            "total_amount": 2600
        }
    ],
    "swiggy": [
        {
            "swiggy_order_id": "SWG-2024-001",
            "created_at": "2024-01-15T13:00:00Z",
            "status": "confirmed",
            "customer": {
                "name": "Sarah Wilson",
                "email": "sarah@example.com",
                "phone": "+91-9876543213"
            },
            "items": [
                {
                    "item_id": "SWG-001",
                    "item_name": "Tennis Bracelet",
                    "quantity": 1,
                    "price": 4500,
                    "sku": "TB-001"
                }
            ],
            "total_amount": 4500
        }
    ],
    "organic": [
        {
            "order_id": "ORG-2024-001",
            "created_at": "2024-01-15T14:00:00Z",
            "status": "pending",
            "customer": {
                "name": "David Brown",
                "email": "david@example.com",
                "phone": "+91-9876543214"
            },
            "items": [
                {
                    "product_id": "ORG-001",
                    "name": "Statement Cocktail Ring",
                    "quantity": 1,
                    "price": 3800,
                    "sku": "SCR-001"
                }
            ],
            "total_amount": 3800
        }
    ],
}
