"""HTTP surface of the payment proxy."""
