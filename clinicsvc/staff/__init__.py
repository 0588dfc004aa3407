"""Staff, task and lookup entities, storage and use cases."""