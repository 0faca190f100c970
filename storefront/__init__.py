"""Order pricing and invoice rendering for the storefront seller console."""
