"""Storage collaborators: psycopg2 batch insert and word stores."""
