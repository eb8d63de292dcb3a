"""Order and product event recording, listeners and statistics queries."""