"""Sound subpackage; it currently holds no modules."""