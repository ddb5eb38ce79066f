"""Pull raw site data (posts, reusable blocks, ACF field groups) into data/<site>/raw."""
