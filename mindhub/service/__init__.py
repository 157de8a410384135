"""Service records and services for course content, notes, progress and timemaps."""