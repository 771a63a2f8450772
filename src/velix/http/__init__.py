"""HTTP value types: request, response, headers, query, forms, cookies."""
