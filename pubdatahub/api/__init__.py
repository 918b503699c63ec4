"""HTTP API: data source listings, paged sample data and job control."""