import asyncio
import asyncpg
from src.config import settings

async def create_db():
    db_name = settings.database.DB_NAME
    try:
        # Подключаемся к служебной БД postgres, чтобы создать рабочую
        sys_conn = await asyncpg.connect(
            user=settings.database.DB_USER,
            password=settings.database.DB_PASSWORD,
            host=settings.database.DB_HOST,
            port=settings.database.DB_PORT,
            database='postgres'
        )

        exists = await sys_conn.fetchval("SELECT 1 FROM pg_database WHERE datname = $1", db_name)
        if not exists:
            print(f"Creating database {db_name}...")
            # CREATE DATABASE не принимает параметры, имя экранируем вручную
            quoted = '"' + db_name.replace('"', '""') + '"'
            await sys_conn.execute(f'CREATE DATABASE {quoted}')
            print("Database created.")
        else:
            print(f"Database {db_name} already exists.")

        await sys_conn.close()

    except (asyncpg.PostgresError, OSError) as e:
        print(f"Error: {e}")

if __name__ == "__main__":
    asyncio.run(create_db())
