from django.contrib.auth.base_user import BaseUserManager

class OrganizationManager(BaseUserManager):
    """
    Manager for the Organization account model, where email is the unique
    identifier for authentication.
    """
    def create_user(self,email,password,**extra_fields):
        """
        Creates and saves an organization with the given email and password.
        """

        if not email:
            raise ValueError('The email must be set!')

        if not extra_fields.get('name'):
            raise ValueError('The organization name must be set!')

        #normalize the email(make domain part lowercase ) for consistency
        email=self.normalize_email(email)

        organization=self.model(email=email,**extra_fields)

        #Set the password using django builtin hashing
        organization.set_password(password)

        organization.save(using=self._db)

        return organization

    def create_superuser(self,email,password,**extra_fields):
        """
        Creates an active organization account for operators.
        There is no admin site, so this only guarantees is_active.
        """
        extra_fields.setdefault('is_active', True)

        if extra_fields.get('is_active') is not True:
            raise ValueError('Superuser must have is_active=True.')

        return self.create_user(email, password, **extra_fields)
