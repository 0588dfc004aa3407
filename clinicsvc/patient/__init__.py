"""Patient and medical record entities, storage and use cases."""