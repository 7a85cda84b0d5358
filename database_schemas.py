# Database schema definitions

USERS_TABLE_SCHEMA = '''
    CREATE TABLE IF NOT EXISTS users (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        email TEXT UNIQUE NOT NULL COLLATE NOCASE,
        password_hash TEXT NOT NULL,
        created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
    )
'''

SESSIONS_TABLE_SCHEMA = '''
    CREATE TABLE IF NOT EXISTS sessions (
        id TEXT PRIMARY KEY, -- token jti
        user_id INTEGER NOT NULL,
        created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
        FOREIGN KEY (user_id) REFERENCES users (id) ON DELETE CASCADE
    )
'''

PROFILES_TABLE_SCHEMA = '''
    CREATE TABLE IF NOT EXISTS profiles (
        id INTEGER PRIMARY KEY,
        username TEXT UNIQUE NOT NULL COLLATE NOCASE,
        email TEXT,
        bio TEXT DEFAULT '',
        avatar_url TEXT,
        role TEXT NOT NULL DEFAULT 'user' CHECK (role IN ('user', 'member', 'head')),
        is_admin BOOLEAN DEFAULT 0,
        involio_profile_url TEXT,
        twitter_url TEXT,
        instagram_url TEXT,
        linkedin_url TEXT,
        youtube_url TEXT,
        discord_tag TEXT,
        tiktok_url TEXT,
        website_url TEXT,
        created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
        updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
        FOREIGN KEY (id) REFERENCES users (id) ON DELETE CASCADE
    )
'''

POSTS_TABLE_SCHEMA = '''
    CREATE TABLE IF NOT EXISTS posts (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        user_id INTEGER NOT NULL,
        content TEXT NOT NULL DEFAULT '',
        image_url TEXT,
        likes_count INTEGER DEFAULT 0,
        comments_count INTEGER DEFAULT 0,
        created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
        updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
        FOREIGN KEY (user_id) REFERENCES profiles (id) ON DELETE CASCADE
    )
'''

POSTS_LIKES_TABLE_SCHEMA = '''
    CREATE TABLE IF NOT EXISTS posts_likes (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        post_id INTEGER NOT NULL,
        user_id INTEGER NOT NULL,
        created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
        UNIQUE(post_id, user_id),
        FOREIGN KEY (post_id) REFERENCES posts (id) ON DELETE CASCADE,
        FOREIGN KEY (user_id) REFERENCES profiles (id) ON DELETE CASCADE
    )
'''

COMMENTS_TABLE_SCHEMA = '''
    CREATE TABLE IF NOT EXISTS comments (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        post_id INTEGER NOT NULL,
        user_id INTEGER NOT NULL,
        content TEXT NOT NULL,
        parent_comment_id INTEGER, -- NULL for top-level comments
        likes_count INTEGER DEFAULT 0,
        created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
        FOREIGN KEY (post_id) REFERENCES posts (id) ON DELETE CASCADE,
        FOREIGN KEY (user_id) REFERENCES profiles (id) ON DELETE CASCADE,
        FOREIGN KEY (parent_comment_id) REFERENCES comments (id) ON DELETE CASCADE
    )
'''

COMMENT_LIKES_TABLE_SCHEMA = '''
    CREATE TABLE IF NOT EXISTS comment_likes (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        comment_id INTEGER NOT NULL,
        user_id INTEGER NOT NULL,
        created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
        UNIQUE(comment_id, user_id),
        FOREIGN KEY (comment_id) REFERENCES comments (id) ON DELETE CASCADE,
        FOREIGN KEY (user_id) REFERENCES profiles (id) ON DELETE CASCADE
    )
'''

ALL_TABLE_SCHEMAS = [
    USERS_TABLE_SCHEMA,
    SESSIONS_TABLE_SCHEMA,
    PROFILES_TABLE_SCHEMA,
    POSTS_TABLE_SCHEMA,
    POSTS_LIKES_TABLE_SCHEMA,
    COMMENTS_TABLE_SCHEMA,
    COMMENT_LIKES_TABLE_SCHEMA,
]
